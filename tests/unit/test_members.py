from datetime import datetime, timedelta, timezone

import pytest

from app.db import crud
from app.errors import (
    AlreadyExistCompanyError, AlreadyExistMemberError, CompanyDomainNotMatchError,
    CompanyNotChosenError, CompanyNotFoundError, IncorrectPasswordError,
    MemberNotExistError, MemberUnauthorizedError, VerificationCodeNotFoundError,
)
from app.models import Comment, Reply, ROLE_EDITOR, ROLE_VIEWER, SHARE_COMPANY
from app.services import companies, members
from app.services.auth import AuthContext, decode_access_token


async def test_sign_up_creates_viewer(db):
    member = await members.sign_up(db, "kim@lunch.test", "password123", "Kim")
    assert member.role == ROLE_VIEWER
    assert member.company_id is None
    assert member.password_hash != "password123"


async def test_sign_up_twice_fails(db):
    await members.sign_up(db, "kim@lunch.test", "password123", "Kim")
    with pytest.raises(AlreadyExistMemberError):
        await members.sign_up(db, "kim@lunch.test", "password456", "Kim Again")


async def test_sign_in_returns_token(db):
    await members.sign_up(db, "kim@lunch.test", "password123", "Kim")
    token = await members.sign_in(db, "kim@lunch.test", "password123")
    assert decode_access_token(token)["sub"] == "kim@lunch.test"


async def test_sign_in_errors(db):
    await members.sign_up(db, "kim@lunch.test", "password123", "Kim")
    with pytest.raises(IncorrectPasswordError):
        await members.sign_in(db, "kim@lunch.test", "wrong-password")
    with pytest.raises(MemberNotExistError):
        await members.sign_in(db, "nobody@lunch.test", "password123")


async def test_verification_promotes_to_editor(db, viewer):
    verification = await members.send_verification_code(db, viewer.email)
    assert len(verification.code) == 6
    assert verification.code.isdigit()

    member = await members.verify_verification_code(db, viewer, verification.code)
    assert member.role == ROLE_EDITOR
    assert await crud.get_verification_by_email(db, viewer.email) is None


async def test_verification_wrong_code(db, viewer):
    verification = await members.send_verification_code(db, viewer.email)
    wrong = "000000" if verification.code != "000000" else "111111"
    with pytest.raises(VerificationCodeNotFoundError):
        await members.verify_verification_code(db, viewer, wrong)


async def test_verification_expired_code(db, viewer):
    verification = await members.send_verification_code(db, viewer.email)
    later = datetime.now(timezone.utc) + timedelta(minutes=10)
    with pytest.raises(VerificationCodeNotFoundError):
        await members.verify_verification_code(db, viewer, verification.code, now=later)


@pytest.mark.parametrize("code", ["１２３４５６", "12345é", "코드"])
async def test_verification_non_ascii_code(db, viewer, code):
    await members.send_verification_code(db, viewer.email)
    with pytest.raises(VerificationCodeNotFoundError):
        await members.verify_verification_code(db, viewer, code)


async def test_verification_without_code(db, viewer):
    with pytest.raises(VerificationCodeNotFoundError):
        await members.verify_verification_code(db, viewer, "123456")


async def test_resending_replaces_previous_code(db, viewer):
    first = await members.send_verification_code(db, viewer.email)
    second = await members.send_verification_code(db, viewer.email)
    stored = await crud.get_verification_by_email(db, viewer.email)
    assert stored.id == second.id
    assert stored.id != first.id


async def test_clear_unused_verification_codes(db, viewer):
    await members.send_verification_code(db, viewer.email)
    assert await members.clear_unused_verification_codes(db) == 0

    later = datetime.now(timezone.utc) + timedelta(minutes=10)
    assert await members.clear_unused_verification_codes(db, now=later) == 1


async def test_update_member_only_self(db, viewer, editor):
    updated = await members.update_member(db, viewer, viewer.member_id, "New Name")
    assert updated.name == "New Name"

    with pytest.raises(MemberUnauthorizedError):
        await members.update_member(db, viewer, editor.member_id, "Hijack")


async def test_change_password(db, viewer):
    with pytest.raises(IncorrectPasswordError):
        await members.change_password(db, viewer, viewer.member_id, "wrong-password", "newpassword1")

    await members.change_password(db, viewer, viewer.member_id, "password123", "newpassword1")
    assert await members.sign_in(db, viewer.email, "newpassword1")


async def test_withdraw_member(db, viewer):
    with pytest.raises(IncorrectPasswordError):
        await members.withdraw_member(db, viewer, viewer.member_id, "wrong-password")

    await members.withdraw_member(db, viewer, viewer.member_id, "password123")
    assert not await crud.member_exists(db, viewer.email)


async def test_withdraw_member_removes_their_content(db, company, editor, viewer):
    diner = await crud.create_diner(db, company.id, "Noodle Bar", "", 37.56, 126.97)
    own_comment = await crud.create_comment(db, diner.id, viewer.member_id, "mine", SHARE_COMPANY)
    editor_comment = await crud.create_comment(db, diner.id, editor.member_id, "theirs", SHARE_COMPANY)
    reply_on_own = await crud.create_reply(db, own_comment.id, editor.member_id, "reply from editor")
    own_reply = await crud.create_reply(db, editor_comment.id, viewer.member_id, "reply from viewer")
    editor_reply = await crud.create_reply(db, editor_comment.id, editor.member_id, "editor again")
    await crud.create_subscription(db, diner.id, viewer.member_id)

    await members.withdraw_member(db, viewer, viewer.member_id, "password123")
    db.expunge_all()

    assert await db.get(Comment, own_comment.id) is None
    assert await db.get(Reply, reply_on_own.id) is None
    assert await db.get(Reply, own_reply.id) is None
    assert await crud.get_subscription(db, diner.id, viewer.member_id) is None

    assert await db.get(Comment, editor_comment.id) is not None
    assert await db.get(Reply, editor_reply.id) is not None


# ── Companies ─────────────────────────────────────────────

@pytest.fixture
def newcomer(db):
    async def _make(email="park@acme.com"):
        member = await members.sign_up(db, email, "password123", "Park")
        return AuthContext.from_member(member)
    return _make


async def test_create_company_requires_matching_domain(db, newcomer):
    auth = await newcomer()
    with pytest.raises(CompanyDomainNotMatchError):
        await companies.create_company(db, auth, "Globex", "", 37.5, 127.0, "globex.com")

    company = await companies.create_company(db, auth, "Acme", "", 37.5, 127.0, "acme.com")
    assert company.domain == "acme.com"

    with pytest.raises(AlreadyExistCompanyError):
        await companies.create_company(db, auth, "Acme 2", "", 37.5, 127.0, "acme.com")


async def test_company_list_matches_member_domain(db, newcomer):
    auth = await newcomer()
    await companies.create_company(db, auth, "Acme", "", 37.5, 127.0, "acme.com")
    await crud.create_company(db, "Globex", "", 37.5, 127.0, "globex.com")

    items, total = await companies.get_company_list(db, auth, page=0, size=10)
    assert total == 1
    assert items[0].name == "Acme"


async def test_choose_company(db, newcomer):
    auth = await newcomer()
    acme = await companies.create_company(db, auth, "Acme", "", 37.5, 127.0, "acme.com")
    globex = await crud.create_company(db, "Globex", "", 37.5, 127.0, "globex.com")

    with pytest.raises(CompanyNotFoundError):
        await companies.choose_company(db, auth, auth.member_id, "NOPE")
    with pytest.raises(CompanyDomainNotMatchError):
        await companies.choose_company(db, auth, auth.member_id, globex.id)

    member = await companies.choose_company(db, auth, auth.member_id, acme.id)
    assert member.company_id == acme.id


async def test_member_company_requires_choice(db, newcomer, company, viewer):
    auth = await newcomer()
    with pytest.raises(CompanyNotChosenError):
        await companies.get_member_company(db, auth)

    assert (await companies.get_member_company(db, viewer)).id == company.id
