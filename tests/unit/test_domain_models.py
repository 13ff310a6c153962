import pytest
from src.domain import Comment, Principal, Question, QuestionStatus, Reply
from src.domain.errors import AuthorizationError
from src.domain.policy import DEFAULT_POLICY, AccessPolicy, Capability, ListScope


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("unassigned", QuestionStatus.UNASSIGNED),
        ("open", QuestionStatus.UNASSIGNED),
        ("OPEN", QuestionStatus.UNASSIGNED),
        ("assigned", QuestionStatus.ASSIGNED),
        (" resolved ", QuestionStatus.RESOLVED),
        ("closed", QuestionStatus.CLOSED),
    ],
)
def test_status_labels(label: str, expected: QuestionStatus) -> None:
    assert QuestionStatus.parse(label) is expected


def test_unknown_status_label() -> None:
    with pytest.raises(ValueError):
        QuestionStatus.parse("pending")


def test_claimable_requires_no_tutor() -> None:
    question = Question(id="q", title="t", description="d", topic="x", student="s")
    assert question.is_claimable

    question.assigned_to = "tutor"
    assert not question.is_claimable


def test_participants_cover_thread_authors() -> None:
    question = Question(
        id="q",
        title="t",
        description="d",
        topic="x",
        student="s",
        assigned_to="t1",
        comments=[
            Comment(id="c", user="t2", text="hi", replies=[Reply(id="r", user="s2", text="yo")])
        ],
    )

    assert question.participants() == {"s", "t1", "t2", "s2"}


def test_default_policy_grants() -> None:
    student = Principal(user_id="s", role="student")
    tutor = Principal(user_id="t", role="tutor")

    assert DEFAULT_POLICY.allows(student, Capability.ASK)
    assert not DEFAULT_POLICY.allows(tutor, Capability.ASK)
    assert DEFAULT_POLICY.allows(tutor, Capability.CLAIM)
    assert DEFAULT_POLICY.list_scope(student) is ListScope.OWN
    assert DEFAULT_POLICY.list_scope(tutor) is ListScope.ASSIGNED


def test_policy_extends_to_new_roles() -> None:
    mentor = Principal(user_id="m", role="mentor")
    policy = AccessPolicy(
        grants={Capability.CLAIM: frozenset({"tutor", "mentor"})},
        list_scopes={"mentor": ListScope.ASSIGNED},
    )

    policy.require(mentor, Capability.CLAIM)
    assert policy.list_scope(mentor) is ListScope.ASSIGNED
    with pytest.raises(AuthorizationError):
        DEFAULT_POLICY.require(mentor, Capability.CLAIM)
