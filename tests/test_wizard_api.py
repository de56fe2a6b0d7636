import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from resume_builder.core.session_store import clear_sessions  # noqa: E402
from resume_builder.gateway.memory import InMemoryResumeGateway  # noqa: E402
from resume_builder.main import app  # noqa: E402
from resume_builder.schemas.resume import ResumeDocument  # noqa: E402
from tests.resume_samples import sample_document, valid_personal_details  # noqa: E402

AUTH = {"Authorization": "Bearer test-token"}


class WizardApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        clear_sessions()
        document = ResumeDocument.model_validate(sample_document())
        self.gateway = InMemoryResumeGateway({document.id: document})
        for target in ("resume_builder.api.v1.wizard.get_gateway", "resume_builder.api.v1.resumes.get_gateway"):
            patcher = patch(target, return_value=self.gateway)
            patcher.start()
            self.addCleanup(patcher.stop)

    def _start(self, resume_id=None):
        response = self.client.post("/v1/wizard/sessions", json={"resume_id": resume_id}, headers=AUTH)
        self.assertEqual(response.status_code, 201)
        return response.json()

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_requires_bearer_token(self):
        response = self.client.post("/v1/wizard/sessions", json={})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Please log in to continue.")

    def test_new_session_starts_in_create_mode(self):
        body = self._start()

        self.assertEqual(body["mode"], "create")
        self.assertEqual(body["active_step"], 0)
        self.assertEqual(body["step"]["key"], "personal_details")
        self.assertEqual(len(body["resume"]["experience"]), 1)
        self.assertEqual(len(body["resume"]["education"]), 1)
        self.assertEqual(body["resume"]["certifications"], [])

    def test_edit_session_loads_document(self):
        body = self._start("65f1c0ffee")

        self.assertEqual(body["mode"], "edit")
        self.assertTrue(body["loaded"])
        self.assertEqual(body["resume"]["personalDetails"]["name"], "Jane Doe")
        self.assertEqual(len(body["resume"]["experience"]), 2)

    def test_missing_resume_falls_back_to_create_mode(self):
        body = self._start("does-not-exist")

        self.assertEqual(body["mode"], "create")
        self.assertIsNone(body["resume_id"])
        self.assertEqual(body["load_error"], "Resume not found")
        self.assertEqual(body["messages"][-1], {"message": "Resume not found", "level": "error"})

    def test_next_reports_field_errors(self):
        session = self._start()
        fields = valid_personal_details()
        fields["personalDetails.email"] = ""
        self.client.patch(f"/v1/wizard/sessions/{session['session_id']}/fields", json={"fields": fields}, headers=AUTH)

        response = self.client.post(f"/v1/wizard/sessions/{session['session_id']}/next", headers=AUTH)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["ok"])
        self.assertEqual(body["active_step"], 0)
        self.assertEqual(body["errors"], {"personalDetails.email": "Email is required"})

    def test_unknown_field_is_rejected(self):
        session = self._start()
        response = self.client.patch(
            f"/v1/wizard/sessions/{session['session_id']}/fields",
            json={"fields": {"personalDetails.twitter": "@jane"}},
            headers=AUTH,
        )
        self.assertEqual(response.status_code, 422)

    def test_badly_typed_values_are_rejected_and_session_stays_usable(self):
        session = self._start()
        sid = session["session_id"]
        self.client.patch(
            f"/v1/wizard/sessions/{sid}/fields",
            json={"fields": {"personalDetails.name": "Jane"}},
            headers=AUTH,
        )

        response = self.client.patch(
            f"/v1/wizard/sessions/{sid}/fields",
            json={"fields": {"personalDetails.name": {"x": 1}}},
            headers=AUTH,
        )
        self.assertEqual(response.status_code, 422)

        appended = self.client.post(
            f"/v1/wizard/sessions/{sid}/groups/certifications/entries",
            json={"initial": {"name": ["CKA"]}},
            headers=AUTH,
        )
        self.assertEqual(appended.status_code, 422)

        current = self.client.get(f"/v1/wizard/sessions/{sid}", headers=AUTH)
        self.assertEqual(current.status_code, 200)
        self.assertEqual(current.json()["resume"]["personalDetails"]["name"], "Jane")
        self.assertEqual(current.json()["resume"]["certifications"], [])
        self.assertEqual(self.client.post(f"/v1/wizard/sessions/{sid}/back", headers=AUTH).status_code, 200)

    def test_entry_lifecycle(self):
        session = self._start()
        base = f"/v1/wizard/sessions/{session['session_id']}/groups/certifications/entries"

        created = self.client.post(base, json={"initial": {"name": "CKA"}}, headers=AUTH)
        self.assertEqual(created.status_code, 201)
        key = created.json()["key"]
        self.assertEqual(created.json()["resume"]["certifications"][0]["key"], key)

        updated = self.client.patch(f"{base}/{key}", json={"changes": {"provider": "CNCF"}}, headers=AUTH)
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["resume"]["certifications"][0]["provider"], "CNCF")

        removed = self.client.delete(f"{base}/{key}", headers=AUTH)
        self.assertTrue(removed.json()["removed"])
        self.assertEqual(removed.json()["resume"]["certifications"], [])

        missing = self.client.delete(f"{base}/{key}", headers=AUTH)
        self.assertEqual(missing.status_code, 404)

    def test_last_experience_entry_is_kept(self):
        session = self._start()
        key = session["resume"]["experience"][0]["key"]

        response = self.client.delete(
            f"/v1/wizard/sessions/{session['session_id']}/groups/experience/entries/{key}",
            headers=AUTH,
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["removed"])
        self.assertEqual(len(response.json()["resume"]["experience"]), 1)

    def test_full_create_flow(self):
        session = self._start()
        sid = session["session_id"]
        experience_key = session["resume"]["experience"][0]["key"]
        education_key = session["resume"]["education"][0]["key"]

        self.client.patch(
            f"/v1/wizard/sessions/{sid}/fields",
            json={"fields": {**valid_personal_details(), "skills": "<ul><li>Python</li></ul>"}},
            headers=AUTH,
        )
        self.client.patch(
            f"/v1/wizard/sessions/{sid}/groups/experience/entries/{experience_key}",
            json={
                "changes": {
                    "jobTitle": "Engineer",
                    "company": "Acme",
                    "location": "Berlin",
                    "startDate": "2020-01-01",
                    "present": True,
                    "project": "<p>Payments</p>",
                }
            },
            headers=AUTH,
        )
        self.client.patch(
            f"/v1/wizard/sessions/{sid}/groups/education/entries/{education_key}",
            json={"changes": {"degree": "BSc", "institution": "TU Berlin", "year": 2018, "month": "June"}},
            headers=AUTH,
        )
        for _ in range(4):
            step = self.client.post(f"/v1/wizard/sessions/{sid}/next", headers=AUTH)
            self.assertTrue(step.json()["ok"], step.json()["errors"])
        self.assertTrue(step.json()["is_last_step"])

        submitted = self.client.post(f"/v1/wizard/sessions/{sid}/submit", headers=AUTH)

        body = submitted.json()
        self.assertTrue(body["ok"])
        self.assertTrue(body["completed"])
        self.assertEqual(body["messages"][-1]["message"], "Resume created successfully")
        self.assertEqual(self.client.get(f"/v1/wizard/sessions/{sid}", headers=AUTH).status_code, 404)

        listing = self.client.get("/v1/resumes", headers=AUTH).json()
        self.assertEqual(listing["total"], 2)

    def test_back_clamps_at_first_step(self):
        session = self._start()
        response = self.client.post(f"/v1/wizard/sessions/{session['session_id']}/back", headers=AUTH)
        self.assertEqual(response.json()["active_step"], 0)

    def test_sessions_are_scoped_to_their_token(self):
        session = self._start()
        response = self.client.get(
            f"/v1/wizard/sessions/{session['session_id']}",
            headers={"Authorization": "Bearer someone-else"},
        )
        self.assertEqual(response.status_code, 404)

    def test_close_session(self):
        session = self._start()
        sid = session["session_id"]
        self.assertEqual(self.client.delete(f"/v1/wizard/sessions/{sid}", headers=AUTH).status_code, 204)
        self.assertEqual(self.client.get(f"/v1/wizard/sessions/{sid}", headers=AUTH).status_code, 404)


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        document = ResumeDocument.model_validate(sample_document())
        self.gateway = InMemoryResumeGateway({document.id: document})
        patcher = patch("resume_builder.api.v1.resumes.get_gateway", return_value=self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_list_resumes(self):
        response = self.client.get("/v1/resumes", headers=AUTH)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 1)
        self.assertEqual(body["resumes"][0]["name"], "Jane Doe")
        self.assertEqual(body["resumes"][0]["experience_count"], 2)

    def test_download_pdf_uses_name_in_filename(self):
        response = self.client.get("/v1/resumes/65f1c0ffee/pdf", headers=AUTH)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["content-type"], "application/pdf")
        self.assertIn('filename="Jane_Doe_resume.pdf"', response.headers["content-disposition"])
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_delete_resume(self):
        response = self.client.delete("/v1/resumes/65f1c0ffee", headers=AUTH)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "deleted")

        missing = self.client.delete("/v1/resumes/65f1c0ffee", headers=AUTH)
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["detail"], "Resume not found")


if __name__ == "__main__":
    unittest.main()
