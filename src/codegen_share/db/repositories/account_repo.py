"""Account repository for database operations."""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from codegen_share.auth.models import Account
from codegen_share.db.engine import get_session
from codegen_share.db.models import AccountRecord
from codegen_share.db.repositories.base import storage_operation
from codegen_share.exceptions import (
    DuplicateFederatedIdError,
    DuplicateUsernameError,
    NotFoundError,
)
from codegen_share.storage.base import AccountStore


def _to_account(record: AccountRecord) -> Account:
    assert record.id is not None
    return Account(
        id=record.id,
        username=record.username,
        password_hash=record.password_hash,
        federated_id=record.federated_id,
        rate_limit_remaining=record.rate_limit_remaining,
    )


class SqlAccountStore(AccountStore):
    """Accounts in SQLite.

    Uniqueness is enforced by unique indexes and the quota decrement is a
    single conditional UPDATE, so several workers can share one database.
    """

    @storage_operation
    async def create(
        self,
        username: str,
        password_hash: str,
        rate_limit_remaining: int,
        federated_id: str | None = None,
    ) -> Account:
        record = AccountRecord(
            username=username,
            password_hash=password_hash,
            federated_id=federated_id,
            rate_limit_remaining=rate_limit_remaining,
        )
        try:
            async with get_session() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except IntegrityError as e:
            if federated_id is not None and "federated_id" in str(e.orig):
                raise DuplicateFederatedIdError(federated_id) from e
            raise DuplicateUsernameError(username) from e
        return _to_account(record)

    @storage_operation
    async def get_by_id(self, account_id: int) -> Account | None:
        async with get_session() as session:
            record = await session.get(AccountRecord, account_id)
            return _to_account(record) if record else None

    @storage_operation
    async def get_by_username(self, username: str) -> Account | None:
        async with get_session() as session:
            result = await session.execute(
                select(AccountRecord).where(AccountRecord.username == username)
            )
            record = result.scalar_one_or_none()
            return _to_account(record) if record else None

    @storage_operation
    async def get_by_federated_id(self, federated_id: str) -> Account | None:
        async with get_session() as session:
            result = await session.execute(
                select(AccountRecord).where(AccountRecord.federated_id == federated_id)
            )
            record = result.scalar_one_or_none()
            return _to_account(record) if record else None

    @storage_operation
    async def consume_quota(self, account_id: int) -> int | None:
        async with get_session() as session:
            result = await session.execute(
                update(AccountRecord)
                .where(
                    col(AccountRecord.id) == account_id,
                    col(AccountRecord.rate_limit_remaining) > 0,
                )
                .values(rate_limit_remaining=AccountRecord.rate_limit_remaining - 1)
                .returning(col(AccountRecord.rate_limit_remaining))
            )
            remaining = result.scalar_one_or_none()
            if remaining is not None:
                return int(remaining)

            if await session.get(AccountRecord, account_id) is None:
                raise NotFoundError("Account not found")
            return None

    @storage_operation
    async def set_quota(self, account_id: int, value: int) -> bool:
        async with get_session() as session:
            result = await session.execute(
                update(AccountRecord)
                .where(col(AccountRecord.id) == account_id)
                .values(rate_limit_remaining=value)
            )
            return bool(result.rowcount)

    @storage_operation
    async def set_all_quotas(self, value: int) -> int:
        async with get_session() as session:
            result = await session.execute(
                update(AccountRecord).values(rate_limit_remaining=value)
            )
            return int(result.rowcount or 0)

