"""
Composition root - Wires settings and adapters into domain services.

Plays the role dependency factories play in a web app: it is the only
place that knows both the configuration framework and the concrete
adapters.
"""

import logging
from dataclasses import dataclass

from psycopg_pool import ConnectionPool

from phonesignup.adapters.crypto import JweCrypto
from phonesignup.adapters.directory import (
    InMemoryAccountBackend,
    InMemoryAccountPropertyStore,
    InMemoryGroupManager,
    InMemoryUserConfig,
)
from phonesignup.adapters.notifier import LoggingAdminNotifier
from phonesignup.adapters.repository import (
    InMemoryRegistrationRepository,
    run_migrations,
)
from phonesignup.adapters.sms import ConsoleSmsGateway
from phonesignup.config.settings import Settings, get_settings
from phonesignup.domain.models import RegistrationPolicy
from phonesignup.domain.notifications import WelcomeNotifier
from phonesignup.domain.ports import (
    AccountBackend,
    AccountPropertyStore,
    AdminNotifier,
    GroupManager,
    RegistrationRepository,
    SmsGateway,
    UserConfig,
)
from phonesignup.domain.registration import RegistrationService

logger = logging.getLogger(__name__)


def policy_from_settings(settings: Settings) -> RegistrationPolicy:
    return RegistrationPolicy(
        default_phone_region=settings.default_phone_region,
        username_policy_regex=settings.username_policy_regex,
        show_fullname=settings.show_fullname,
        enforce_fullname=settings.enforce_fullname,
        show_phone=settings.show_phone,
        enforce_phone=settings.enforce_phone,
        registered_user_group=settings.registered_user_group,
        admin_approval_required=settings.admin_approval_required,
        login_url=settings.login_url,
        product_name=settings.product_name,
    )


def build_registration_service(
    settings: Settings,
    *,
    repository: RegistrationRepository,
    accounts: AccountBackend,
    groups: GroupManager,
    user_config: UserConfig,
    sms_gateway: SmsGateway,
    admin_notifier: AdminNotifier,
    account_properties: AccountPropertyStore | None = None,
) -> RegistrationService:
    """
    Create a registration service from settings and collaborators.

    Pass ``account_properties=None`` when the directory cannot store
    account properties; the decision is made here, once.
    """
    policy = policy_from_settings(settings)
    return RegistrationService(
        repository=repository,
        accounts=accounts,
        groups=groups,
        user_config=user_config,
        crypto=JweCrypto(settings.encryption_secret),
        notifier=WelcomeNotifier(sms_gateway=sms_gateway, product_name=policy.product_name),
        admin_notifier=admin_notifier,
        policy=policy,
        account_properties=account_properties,
    )


@dataclass
class InMemoryDirectory:
    """The in-memory collaborators behind a development service."""

    accounts: InMemoryAccountBackend
    groups: InMemoryGroupManager
    properties: InMemoryAccountPropertyStore
    user_config: InMemoryUserConfig


def build_in_memory_service(
    settings: Settings | None = None,
    repository: RegistrationRepository | None = None,
) -> tuple[RegistrationService, InMemoryDirectory]:
    """
    Wire a service to the in-memory directory and console adapters.

    Returns:
        The service and the directory it provisions into
    """
    settings = settings or get_settings()
    directory = InMemoryDirectory(
        accounts=InMemoryAccountBackend(bcrypt_cost=settings.bcrypt_cost),
        groups=InMemoryGroupManager(),
        properties=InMemoryAccountPropertyStore(),
        user_config=InMemoryUserConfig(),
    )
    service = build_registration_service(
        settings,
        repository=repository or InMemoryRegistrationRepository(),
        accounts=directory.accounts,
        groups=directory.groups,
        user_config=directory.user_config,
        sms_gateway=ConsoleSmsGateway(),
        admin_notifier=LoggingAdminNotifier(),
        account_properties=directory.properties,
    )
    return service, directory


def create_pool(settings: Settings, migrate: bool = True) -> ConnectionPool:
    """
    Open the PostgreSQL connection pool and bring the schema up to date.

    The caller owns the pool and must close it.
    """
    logger.info("Connecting to database...")
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )
    if migrate:
        logger.info("Running database migrations...")
        run_migrations(pool)
    return pool
