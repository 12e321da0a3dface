from models.session_models import Approval, PaintingBrief, Session, TodoItem
from print_sessions import format_session


def test_format_session_lists_brief_todos_and_approvals():
    session = Session(
        id="abc123",
        created_at=0,
        brief=PaintingBrief(style="bold", constraints={"size": "xl"}),
        todos=[TodoItem(id="todo-1", text="Pick frame"), TodoItem(id="todo-2", text="Book", status="done")],
        approvals=[Approval(ts=0, text="UI_RESPONSE style -> bold")],
    )

    lines = format_session(session)

    assert lines[0] == "Session abc123 (created 1970-01-01 00:00:00 UTC)"
    assert "  style: bold" in lines
    assert "  constraints: {'size': 'xl'}" in lines
    assert "  palette: None" not in lines
    assert "  [ ] Pick frame" in lines
    assert "  [x] Book" in lines
    assert lines[-1] == "  1970-01-01 00:00:00  UI_RESPONSE style -> bold"
