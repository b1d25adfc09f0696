from __future__ import annotations

from conftest import FakeResponse
from pipelines.extraction_orchestrator import ExtractionOrchestrator, ExtractionStatus
from profile_pages import JANE, JANE_URL
from services.messaging import MessageRouter
from services.sync_service import AirtableSyncService
from sources.html_page import HtmlFilePage

CONFIG = {"apiToken": "pat123", "baseId": "appBase", "tableId": "tblContacts"}

NARROW_TABLE = {
    "tables": [
        {
            "id": "tblContacts",
            "name": "Contacts",
            "fields": [
                {"name": "Name", "type": "singleLineText"},
                {"name": "Job Title", "type": "singleLineText"},
                {"name": "Location", "type": "singleLineText"},
            ],
        }
    ]
}


def test_page_to_airtable_record(tmp_path, settings, fake_session, fake_scheduler):
    """Saved profile page -> pushed extraction -> schema-filtered Airtable create."""
    page_file = tmp_path / "profile.html"
    page_file.write_text(JANE, encoding="utf-8")
    fake_session.add("GET", "/meta/bases/appBase/tables", FakeResponse(200, NARROW_TABLE))
    fake_session.add("POST", "/appBase/tblContacts", FakeResponse(200, {"id": "recE2E"}))

    pushed = []
    orchestrator = ExtractionOrchestrator(HtmlFilePage(page_file, JANE_URL), fake_scheduler, notifier=pushed.append, settings=settings)
    router = MessageRouter(AirtableSyncService(settings=settings, session=fake_session), orchestrator)

    orchestrator.start()
    outcomes = fake_scheduler.run_due()
    assert outcomes[0].status is ExtractionStatus.SUCCESS
    assert pushed[0]["action"] == "profileDataExtracted"

    response = router.handle({"action": "saveToAirtable", "data": pushed[0]["data"], "config": CONFIG})

    assert response["success"] is True
    assert response["recordId"] == "recE2E"
    assert fake_session.calls_to("POST")[0]["json"] == {"fields": {"Name": "Jane Doe", "Job Title": "Product Manager"}}
    assert sorted(e["field"] for e in response["excludedFields"]) == ["LinkedIn URL", "Profile Picture"]
    assert response["message"].endswith("(2 fields excluded due to type mismatches)")
