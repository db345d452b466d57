"""Find and remove hosted assets that no catalog record references.

Abandoned uploads reach the media host but never produce a record; this
sweep is run by hand through ``flask reconcile-assets``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from ..errors import ExternalDependencyError
from ..utils.logger import get_logger
from ..utils.time import as_aware_utc, utcnow
from .catalog_store import MongoImageStore
from .media_library import HostedAsset, MediaHost

logger = get_logger(__name__)

DEFAULT_GRACE_PERIOD = timedelta(hours=24)


@dataclass
class ReconcileReport:
    scanned: int = 0
    orphaned: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def _is_old_enough(asset: HostedAsset, cutoff) -> bool:
    if asset.created_at is None:
        return False
    return as_aware_utc(asset.created_at) <= cutoff


def reconcile_assets(
    store: MongoImageStore,
    media_host: MediaHost,
    *,
    folder: str,
    grace_period: timedelta = DEFAULT_GRACE_PERIOD,
    apply: bool = False,
) -> ReconcileReport:
    report = ReconcileReport()
    referenced = store.public_ids()
    cutoff = utcnow() - grace_period

    for asset in media_host.iter_folder_assets(folder):
        report.scanned += 1
        if asset.public_id in referenced or not _is_old_enough(asset, cutoff):
            continue
        report.orphaned.append(asset.public_id)

        if not apply:
            continue
        try:
            media_host.delete_asset(asset.public_id)
        except ExternalDependencyError:
            report.failed.append(asset.public_id)
        else:
            report.deleted.append(asset.public_id)

    logger.info(
        "[RECONCILE] folder=%s scanned=%s orphaned=%s deleted=%s failed=%s",
        folder,
        report.scanned,
        len(report.orphaned),
        len(report.deleted),
        len(report.failed),
    )
    return report


__all__ = ["DEFAULT_GRACE_PERIOD", "ReconcileReport", "reconcile_assets"]
