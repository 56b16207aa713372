"""Business logic services: the per-application registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from weblist.config import Settings
from weblist.services.archive_exporter import ArchiveExporter
from weblist.services.binary_detector import BinaryDetector
from weblist.services.csrf import CSRFGuard
from weblist.services.directory_lister import DirectoryLister
from weblist.services.path_resolver import PathResolver
from weblist.services.rate_limiter import RateLimiter
from weblist.services.session_auth import SessionAuthenticator, SessionSecret
from weblist.services.upload_service import UploadService
from weblist.utils.lru import LRUCache

logger = logging.getLogger(__name__)


@dataclass
class ServiceRegistry:
    """Everything a request handler needs, built once per application."""

    settings: Settings
    resolver: PathResolver
    detector: BinaryDetector
    lister: DirectoryLister
    exporter: ArchiveExporter
    uploader: UploadService
    csrf: CSRFGuard
    limiter: RateLimiter
    authenticator: Optional[SessionAuthenticator] = None
    request_limiter: Optional[RateLimiter] = None


def _session_secret(settings: Settings) -> SessionSecret:
    if settings.session_secret:
        return SessionSecret.from_string(settings.session_secret)
    logger.info("Generated random session secret (sessions end on restart)")
    return SessionSecret.generate()


def _request_limiter(settings: Settings) -> Optional[RateLimiter]:
    if settings.request_rate_per_second <= 0:
        return None
    return RateLimiter(
        rate=settings.request_rate_per_second,
        burst=max(1, settings.request_burst),
        ttl_seconds=settings.login_bucket_ttl_seconds,
        name="requests",
    )


def build_services(settings: Settings) -> ServiceRegistry:
    """Create and wire up all services for one application instance."""
    resolver = PathResolver(settings.root_dir, settings.exclude)

    cache = LRUCache(settings.binary_cache_size) if settings.binary_cache_size > 0 else None
    detector = BinaryDetector(resolver, cache)

    authenticator = None
    if settings.auth_enabled:
        authenticator = SessionAuthenticator(
            secret=_session_secret(settings),
            username=settings.auth_user,
            password=settings.auth,
            ttl_seconds=settings.session_ttl_seconds,
        )
        logger.info("Authentication enabled for user %r", settings.auth_user)

    registry = ServiceRegistry(
        settings=settings,
        resolver=resolver,
        detector=detector,
        lister=DirectoryLister(resolver, detector, recursive_mtime=settings.recursive_mtime),
        exporter=ArchiveExporter(resolver),
        uploader=UploadService(resolver, overwrite=settings.upload_overwrite),
        csrf=CSRFGuard(ttl_seconds=settings.csrf_ttl_seconds),
        limiter=RateLimiter(
            rate=settings.login_rate_per_second,
            burst=settings.login_burst,
            ttl_seconds=settings.login_bucket_ttl_seconds,
        ),
        authenticator=authenticator,
        request_limiter=_request_limiter(settings),
    )
    logger.info("Services initialized (root=%s)", resolver.root)
    return registry
