import json
import sys
import unittest
from pathlib import Path

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_builder.core.errors import NetworkError, NotFoundError, RemoteValidationError  # noqa: E402
from resume_builder.gateway.auth import AuthContext  # noqa: E402
from resume_builder.gateway.http import HttpResumeGateway  # noqa: E402
from resume_builder.schemas.resume import ResumeDocument  # noqa: E402
from resume_builder.wizard.controller import WizardController  # noqa: E402
from resume_builder.wizard.notifications import RecordingNotifier  # noqa: E402
from tests.resume_samples import sample_document  # noqa: E402


class RecordingHandler:
    def __init__(self, responder):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def _gateway(responder, token: str | None = "secret-token") -> tuple[HttpResumeGateway, RecordingHandler]:
    handler = RecordingHandler(responder)
    gateway = HttpResumeGateway(
        AuthContext(token=token),
        base_url="http://resume-api.test/api/",
        timeout=2.0,
        transport=httpx.MockTransport(handler),
    )
    return gateway, handler


class HttpResumeGatewayTests(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_by_id_sends_bearer_token_and_parses_document(self):
        payload = sample_document()
        payload["_id"] = payload.pop("id")
        gateway, handler = _gateway(lambda request: httpx.Response(200, json=payload))

        document = await gateway.fetch_by_id("65f1c0ffee")

        request = handler.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/api/resumes/by-id/65f1c0ffee")
        self.assertEqual(request.headers["Authorization"], "Bearer secret-token")
        self.assertEqual(document.id, "65f1c0ffee")
        self.assertEqual(document.personalDetails.name, "Jane Doe")

    async def test_fetch_by_id_unwraps_data_envelope(self):
        gateway, _ = _gateway(lambda request: httpx.Response(200, json={"data": sample_document()}))

        document = await gateway.fetch_by_id("65f1c0ffee")

        self.assertEqual(len(document.experience), 2)

    async def test_anonymous_requests_carry_no_authorization(self):
        gateway, handler = _gateway(lambda request: httpx.Response(200, json=[]), token=None)

        await gateway.list_resumes()

        self.assertNotIn("Authorization", handler.requests[0].headers)

    async def test_not_found_uses_server_message(self):
        gateway, _ = _gateway(lambda request: httpx.Response(404, json={"message": "Resume not found"}))

        with self.assertRaises(NotFoundError) as ctx:
            await gateway.fetch_by_id("missing")

        self.assertEqual(ctx.exception.message, "Resume not found")
        self.assertEqual(ctx.exception.status_code, 404)

    async def test_rejected_document_maps_to_remote_validation_error(self):
        gateway, _ = _gateway(lambda request: httpx.Response(400, json={"message": "Email already used"}))

        with self.assertRaises(RemoteValidationError) as ctx:
            await gateway.create(ResumeDocument.model_validate(sample_document()))

        self.assertEqual(ctx.exception.message, "Email already used")

    async def test_server_error_without_body_uses_default_message(self):
        gateway, _ = _gateway(lambda request: httpx.Response(500, text="boom"))

        with self.assertRaises(NetworkError) as ctx:
            await gateway.update("65f1c0ffee", ResumeDocument.model_validate(sample_document()))

        self.assertEqual(ctx.exception.message, "Failed to save resume")
        self.assertEqual(ctx.exception.status_code, 500)

    async def test_transport_failure_maps_to_network_error(self):
        def responder(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway, _ = _gateway(responder)

        with self.assertRaises(NetworkError) as ctx:
            await gateway.fetch_by_id("65f1c0ffee")

        self.assertEqual(ctx.exception.message, "Failed to fetch resume")

    async def test_undecodable_body_maps_to_network_error(self):
        gateway, _ = _gateway(
            lambda request: httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip at all"),
            )
        )

        with self.assertRaises(NetworkError) as ctx:
            await gateway.fetch_by_id("65f1c0ffee")

        self.assertEqual(ctx.exception.message, "Failed to fetch resume")

    async def test_wizard_load_falls_back_when_body_cannot_be_decoded(self):
        gateway, _ = _gateway(
            lambda request: httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip at all"),
            )
        )
        notifier = RecordingNotifier()
        controller = WizardController(gateway, resume_id="65f1c0ffee", notifier=notifier)

        self.assertFalse(await controller.load())

        self.assertEqual(controller.mode, "create")
        self.assertIsNone(controller.resume_id)
        self.assertEqual(controller.load_error.message, "Failed to fetch resume")
        self.assertEqual(notifier.last.message, "Failed to fetch resume")

    async def test_create_posts_payload_without_id_and_returns_new_id(self):
        gateway, handler = _gateway(
            lambda request: httpx.Response(201, json={"message": "ok", "resume": {"_id": "new-id"}})
        )

        resume_id = await gateway.create(ResumeDocument.model_validate(sample_document()))

        request = handler.requests[0]
        body = json.loads(request.content)
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/api/resumes")
        self.assertNotIn("id", body)
        self.assertEqual(body["experience"][0]["endDate"], "present")
        self.assertEqual(resume_id, "new-id")

    async def test_update_uses_put_on_resume_path(self):
        gateway, handler = _gateway(lambda request: httpx.Response(200, json={"message": "updated"}))

        await gateway.update("65f1c0ffee", ResumeDocument.model_validate(sample_document()))

        request = handler.requests[0]
        self.assertEqual(request.method, "PUT")
        self.assertEqual(request.url.path, "/api/resumes/65f1c0ffee")

    async def test_list_resumes_reads_envelope_and_skips_invalid_items(self):
        gateway, handler = _gateway(
            lambda request: httpx.Response(200, json={"resumes": [sample_document(), "not-a-resume"]})
        )

        documents = await gateway.list_resumes()

        self.assertEqual(handler.requests[0].url.path, "/api/resumes/user")
        self.assertEqual(len(documents), 1)
        self.assertEqual(documents[0].id, "65f1c0ffee")

    async def test_delete_and_pdf_download(self):
        def responder(request):
            if request.method == "DELETE":
                return httpx.Response(200, json={"message": "deleted"})
            return httpx.Response(200, content=b"%PDF-1.4", headers={"Content-Type": "application/pdf"})

        gateway, handler = _gateway(responder)

        await gateway.delete("65f1c0ffee")
        content = await gateway.download_pdf("65f1c0ffee")

        self.assertEqual(handler.requests[0].url.path, "/api/resumes/65f1c0ffee")
        self.assertEqual(handler.requests[1].url.path, "/api/resumes/65f1c0ffee/pdf")
        self.assertEqual(content, b"%PDF-1.4")


if __name__ == "__main__":
    unittest.main()
