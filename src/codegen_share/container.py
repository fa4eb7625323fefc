"""Wiring of the core services for one application instance."""

from dataclasses import dataclass
from datetime import timedelta

from codegen_share.auth.identity import IdentityStore
from codegen_share.auth.oauth.google import GoogleOAuthClient
from codegen_share.auth.passwords import PasswordHasher
from codegen_share.auth.sessions import SessionManager
from codegen_share.auth.tokens import SessionTokenHandler
from codegen_share.config.settings import Settings
from codegen_share.core.clock import Clock, utc_now
from codegen_share.generation.client import CodeGenerator
from codegen_share.quota.limiter import RateLimiter
from codegen_share.scheduler.maintenance import MaintenanceScheduler
from codegen_share.sharing.store import SharedArtifactStore
from codegen_share.storage.base import AccountStore, ArtifactStore
from codegen_share.storage.memory import InMemoryAccountStore, InMemoryArtifactStore


@dataclass
class ServiceContainer:
    """Services shared by every request of an application."""

    settings: Settings
    accounts: AccountStore
    artifact_backend: ArtifactStore
    hasher: PasswordHasher
    identity: IdentityStore
    sessions: SessionManager
    limiter: RateLimiter
    artifacts: SharedArtifactStore
    generator: CodeGenerator
    scheduler: MaintenanceScheduler
    oauth: GoogleOAuthClient | None = None


def _default_stores(settings: Settings) -> tuple[AccountStore, ArtifactStore]:
    if settings.storage.backend == "sqlite":
        # Imported lazily so the memory backend never loads SQLAlchemy
        from codegen_share.db.repositories import SqlAccountStore, SqlArtifactStore

        return SqlAccountStore(), SqlArtifactStore()
    return InMemoryAccountStore(), InMemoryArtifactStore()


def build_container(
    settings: Settings,
    *,
    clock: Clock = utc_now,
    account_store: AccountStore | None = None,
    artifact_store: ArtifactStore | None = None,
    hasher: PasswordHasher | None = None,
    generator: CodeGenerator | None = None,
    oauth_client: GoogleOAuthClient | None = None,
) -> ServiceContainer:
    """Build the services described by the settings.

    Any component can be passed in to replace the configured one, which is
    how tests inject clocks, cheap hashers and mock HTTP transports.
    """
    if account_store is None or artifact_store is None:
        default_accounts, default_artifacts = _default_stores(settings)
        account_store = account_store or default_accounts
        artifact_store = artifact_store or default_artifacts
    accounts, artifact_backend = account_store, artifact_store

    hasher = hasher or PasswordHasher(cost=settings.security.scrypt_cost)
    identity = IdentityStore(
        accounts, hasher, initial_quota=settings.rate_limit.ceiling
    )
    sessions = SessionManager(
        identity,
        hasher,
        SessionTokenHandler(settings.security.session_secret or ""),
        session_lifetime=timedelta(seconds=settings.security.session_max_age_seconds),
        remember_lifetime=timedelta(
            seconds=settings.security.remember_max_age_seconds
        ),
        clock=clock,
    )
    limiter = RateLimiter(
        accounts,
        ceiling=settings.rate_limit.ceiling,
        reset_interval_seconds=settings.rate_limit.reset_interval_seconds,
    )
    artifacts = SharedArtifactStore(
        artifact_backend,
        retention=timedelta(days=settings.sharing.retention_days),
        id_length=settings.sharing.share_id_length,
        max_attempts=settings.sharing.max_publish_attempts,
        clock=clock,
    )
    scheduler = MaintenanceScheduler(
        limiter,
        artifacts,
        reset_interval=settings.rate_limit.reset_interval_seconds,
        sweep_interval=settings.sharing.sweep_interval_seconds,
    )
    if oauth_client is None and settings.google_oauth.enabled:
        oauth_client = GoogleOAuthClient(settings.google_oauth)

    return ServiceContainer(
        settings=settings,
        accounts=accounts,
        artifact_backend=artifact_backend,
        hasher=hasher,
        identity=identity,
        sessions=sessions,
        limiter=limiter,
        artifacts=artifacts,
        generator=generator or CodeGenerator(settings.generator),
        scheduler=scheduler,
        oauth=oauth_client,
    )
