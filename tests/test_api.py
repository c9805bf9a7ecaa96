# tests/test_api.py
import io
import threading

from docx import Document

from app.i18n import TRANSLATIONS
from app.models import BusinessIdeaSession
from app.services import db_session

CONTACT = {
    "first_name": "Anna",
    "last_name": "Virtanen",
    "email": "anna@example.fi",
    "phone": "0401234567",
    "date_of_birth": "1990-05-17",
    "municipality": "Espoo",
}

SUMMARY_JSON = {
    "whatSell": "Handmade furniture",
    "toWhom": "Young families",
    "how": "Online store",
    "companyFormSuggestion": "Toiminimi",
    "companyFormReasoning": "Simple to start",
    "keyQuestionsForAdvisor": "How to price?",
    "specialTopics": "User wants help with VAT.",
}

# One message per assistant turn needed to walk BASICS..MONEY
INTERVIEW = [
    "No business ID yet, just starting.",      # BASICS -> IDEA
    "I sell handmade furniture products.",     # IDEA -> HOW
    "My customers are young families.",        # HOW 1/3
    "I deliver through an online store.",      # HOW 2/3
    "I am not sure about the company form.",   # HOW -> MONEY
    "The price is around 500 EUR per table.",  # MONEY -> SPECIAL, ready
]


def _docx_bytes(text):
    doc = Document()
    doc.add_paragraph(text)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _start(client, **kwargs):
    payload = {"ui_language": "en", **kwargs}
    resp = client.post("/api/session/start", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def _chat(client, session_id, message):
    return client.post("/api/chat", json={"session_id": session_id, "message": message})


def _run_interview(client, session_id):
    last = None
    for message in INTERVIEW:
        last = _chat(client, session_id, message)
        assert last.status_code == 200, last.text
    return last.json()


def test_root(client):
    assert client.get("/").status_code == 200


def test_start_session_asks_onboarding_question(client):
    body = _start(client)

    assert body["phase"] == "BASICS"
    assert body["phase_step_count"] == 1
    assert body["step_index"] == 1
    assert body["total_steps"] == 6
    assert body["section_title"] == "Basic info & company status"
    assert body["messages"] == [
        {"role": "assistant", "content": TRANSLATIONS["en"]["home.onboardingQuestion"]}
    ]


def test_start_session_with_documents_waits_for_upload(client):
    body = _start(client, has_documents=True, user_language="fi")
    assert body["messages"] == []
    assert body["section_title"] == TRANSLATIONS["fi"]["chat.section.basics"]


def test_first_answer_moves_to_idea_and_records_company_status(client):
    sid = _start(client)["session_id"]
    resp = _chat(client, sid, "We already have an Oy.")

    body = resp.json()
    assert body["phase"] == "IDEA"
    assert body["phase_step_count"] == 0
    assert len(body["assistant_messages"]) == 1

    with db_session() as db:
        row = db.get(BusinessIdeaSession, sid)
        assert row.special_topics == "Company registration status: We already have an Oy."


def test_full_interview_fires_readiness_once(client, llm):
    sid = _start(client)["session_id"]
    body = _run_interview(client, sid)

    assert body["phase"] == "CONTACT"
    assert body["ready"] is True
    assert body["ready_fired"] is True
    assert body["ready_announced"] is True
    assert body["assistant_messages"][-1]["content"] == TRANSLATIONS["en"]["chat.readyPrompt"]

    again = _chat(client, sid, "Thanks!").json()
    assert again["phase"] == "CONTACT"
    assert again["ready_fired"] is False
    assert len(again["assistant_messages"]) == 1

    # every chat turn made exactly one model call
    assert len(llm.calls) == len(INTERVIEW) + 1


def test_failed_model_call_leaves_session_untouched(client, llm):
    sid = _start(client)["session_id"]
    llm.fail = True

    resp = _chat(client, sid, "Hello")
    assert resp.status_code == 502
    assert resp.json()["retryable"] is True

    state = client.get(f"/api/session/{sid}").json()
    assert state["phase"] == "BASICS"
    assert state["phase_step_count"] == 1
    assert len(state["messages"]) == 1


def test_unknown_session_is_404(client):
    assert _chat(client, "missing", "Hello").status_code == 404
    assert client.get("/api/session/missing").status_code == 404
    assert client.get("/api/session/contact", params={"session_id": "missing"}).status_code == 404


def test_invalid_requests_are_400(client):
    sid = _start(client)["session_id"]

    assert client.post("/api/chat", json={"session_id": sid}).status_code == 400
    blank = _chat(client, sid, "   ")
    assert blank.status_code == 400
    assert blank.json()["field"] == "message"
    assert client.post("/api/session/start", json={"ui_language": ""}).status_code == 400


def test_summary_is_locked_before_readiness(client):
    sid = _start(client)["session_id"]
    _chat(client, sid, "Hello")

    resp = client.post("/api/summary", json={"session_id": sid})
    assert resp.status_code == 409
    assert "missing_fields" not in resp.json()


def test_summary_needs_complete_contact(client, llm):
    sid = _start(client)["session_id"]
    _run_interview(client, sid)

    resp = client.post("/api/summary", json={"session_id": sid})
    assert resp.status_code == 409
    assert resp.json()["missing_fields"] == [
        "first_name", "last_name", "email", "phone", "date_of_birth", "municipality",
    ]

    contact = client.post("/api/session/contact", json={"session_id": sid, **CONTACT})
    assert contact.status_code == 200
    assert contact.json()["complete"] is True

    fetched = client.get("/api/session/contact", params={"session_id": sid}).json()
    assert fetched["contact"]["date_of_birth"] == "1990-05-17"

    llm.queue(SUMMARY_JSON)
    summary = client.post("/api/summary", json={"session_id": sid})
    assert summary.status_code == 200, summary.text
    body = summary.json()
    assert body["what_sell"] == "Handmade furniture"
    assert body["special_topics"] == "Anna Virtanen wants help with VAT."
    assert body["confirmed"] is False


def test_contact_validation(client):
    sid = _start(client)["session_id"]
    resp = client.post(
        "/api/session/contact",
        json={"session_id": sid, **CONTACT, "email": "foo@bar"},
    )
    assert resp.status_code == 400

    state = client.get(f"/api/session/{sid}").json()
    assert state["contact_complete"] is False


def test_confirm_summary_stores_edits(client, service):
    sid = _start(client)["session_id"]
    resp = client.post(
        "/api/summary/confirm",
        json={"session_id": sid, "what_sell": "Bread", "to_whom": "Cafes"},
    )
    assert resp.status_code == 200
    assert resp.json()["confirmed"] is True

    with db_session() as db:
        row = db.get(BusinessIdeaSession, sid)
        assert row.what_sell == "Bread"
        assert row.how == ""
        assert row.summary_confirmed_at is not None


def test_upload_with_enough_info_skips_to_special(client, llm):
    sid = _start(client, has_documents=True)["session_id"]
    llm.queue(
        "Nice plan for a bakery.",
        {"hasEnoughInfo": True, "assistantSummary": "Your plan covers the basics.", "missingTopics": []},
    )

    resp = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files={"file": ("plan.docx", _docx_bytes("We bake bread for cafes."))},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["has_enough_info"] is True
    assert body["phase"] == "SPECIAL"
    assert body["phase_step_count"] == 0
    assert body["ready_announced"] is True
    assert len(body["assistant_messages"]) == 1
    message = body["assistant_messages"][0]["content"]
    assert message.startswith("Nice plan for a bakery.")
    assert TRANSLATIONS["en"]["upload.enoughInfoQuestion"] in message

    # the insight prompt saw the extracted document text
    assert "We bake bread for cafes." in llm.calls[0]["messages"][1]["content"]

    after = _chat(client, sid, "No special worries.").json()
    assert after["phase"] == "CONTACT"
    assert after["ready_fired"] is False


def test_upload_without_enough_info_starts_basics(client, llm):
    sid = _start(client, has_documents=True)["session_id"]
    llm.queue(
        "Interesting idea.",
        {"hasEnoughInfo": False, "assistantSummary": "", "missingTopics": ["pricing"]},
    )

    resp = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files=[
            ("files", ("a.docx", _docx_bytes("Part one."))),
            ("files", ("b.txt", b"ignored")),
        ],
    )
    body = resp.json()
    assert body["phase"] == "BASICS"
    assert body["phase_step_count"] == 1
    assert body["missing_topics"] == ["pricing"]
    assert [m["content"] for m in body["assistant_messages"]][-1] == (
        TRANSLATIONS["en"]["home.onboardingQuestion"]
    )


def test_upload_with_no_readable_text_is_400(client, llm):
    sid = _start(client, has_documents=True)["session_id"]
    resp = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files={"file": ("notes.txt", b"plain text")},
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "files"
    assert llm.calls == []


def test_upload_after_chat_is_rejected(client):
    sid = _start(client)["session_id"]
    _chat(client, sid, "Hello")

    resp = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files={"file": ("plan.docx", _docx_bytes("Plan"))},
    )
    assert resp.status_code == 409


def test_translate_thread(client, llm):
    llm.queue({"messages": [{"role": "assistant", "content": "Hei"}]})
    resp = client.post(
        "/api/translate-thread",
        json={"target_language": "fi", "messages": [{"role": "assistant", "content": "Hi"}]},
    )
    assert resp.json() == {"messages": [{"role": "assistant", "content": "Hei"}]}


def test_advisor_login_and_listing(client):
    _start(client)

    assert client.post("/api/advisor/login", json={"password": "advisor-pass"}).status_code == 200
    assert client.post("/api/advisor/login", json={"password": "nope"}).status_code == 401
    assert client.post("/api/advisor/login", json={}).status_code == 400

    assert client.get("/api/advisor/sessions").status_code == 400
    listing = client.get("/api/advisor/sessions", headers={"X-Advisor-Password": "advisor-pass"})
    assert listing.status_code == 200
    assert listing.json()[0]["phase"] == "BASICS"


def test_concurrent_turns_on_one_session_are_serialized(service):
    sid = service.start_session("en").session_id
    threads = [
        threading.Thread(target=service.submit_user_turn, args=(sid, f"message {i}"))
        for i in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    turns = service.get_session(sid).turns
    assert [t.role for t in turns] == ["assistant"] + ["user", "assistant"] * 4


def test_second_upload_is_rejected(client, llm):
    sid = _start(client, has_documents=True)["session_id"]
    llm.queue(
        "Nice plan.",
        {"hasEnoughInfo": True, "assistantSummary": "Complete.", "missingTopics": []},
    )
    first = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files={"file": ("plan.docx", _docx_bytes("We bake bread."))},
    )
    assert first.status_code == 200
    assert first.json()["phase"] == "SPECIAL"

    second = client.post(
        "/api/upload-business-plan",
        data={"session_id": sid},
        files={"file": ("plan.docx", _docx_bytes("Another plan."))},
    )
    assert second.status_code == 409

    state = client.get(f"/api/session/{sid}").json()
    assert state["phase"] == "SPECIAL"
    assert state["phase_step_count"] == 0
    assert len(state["messages"]) == 1


def test_chat_without_upload_starts_basics_from_zero(client):
    body = _start(client, has_documents=True)
    sid = body["session_id"]
    assert body["phase_step_count"] == 0

    first = _chat(client, sid, "Actually I have no documents.").json()
    assert (first["phase"], first["phase_step_count"]) == ("BASICS", 1)

    second = _chat(client, sid, "I'm just starting out.").json()
    assert (second["phase"], second["phase_step_count"]) == ("IDEA", 0)


def test_session_locks_are_released(client, service):
    for i in range(20):
        assert _chat(client, f"missing-{i}", "Hello").status_code == 404

    sid = _start(client)["session_id"]
    assert _chat(client, sid, "Hello").status_code == 200

    assert service._locks == {}
