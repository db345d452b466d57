"""Custom Flask CLI commands."""

from __future__ import annotations

import logging
from datetime import timedelta

import click
from flask import Flask, current_app

from .errors import GalleryError
from .services.asset_reconciler import reconcile_assets
from .services.catalog import get_catalog


def register_cli_commands(app: Flask) -> None:
    """Register application specific CLI commands."""

    @app.cli.command("seed-images")
    def seed_images() -> None:
        """Insert the sample images when the catalog is empty."""

        logger = current_app.logger or logging.getLogger(__name__)
        try:
            inserted = get_catalog().seed_if_empty()
        except GalleryError as exc:
            logger.exception("Seeding failed")
            raise click.ClickException(exc.message) from exc

        if inserted:
            click.echo(f"Seeded {inserted} sample images")
        else:
            click.echo("Catalog already holds images; nothing seeded")

    @app.cli.command("ensure-indexes")
    def ensure_indexes() -> None:
        """Create the text, sort and tag indexes on the images collection."""

        try:
            get_catalog().store.ensure_indexes()
        except GalleryError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo("Image indexes ensured")

    @app.cli.command("reconcile-assets")
    @click.option(
        "--grace-hours",
        type=click.IntRange(min=0),
        default=24,
        show_default=True,
        help="Ignore assets uploaded more recently than this.",
    )
    @click.option(
        "--apply",
        is_flag=True,
        default=False,
        help="Delete the orphaned assets instead of only listing them.",
    )
    def reconcile(grace_hours: int, apply: bool) -> None:
        """Report (or delete) hosted assets that no image record references."""

        catalog = get_catalog()
        try:
            report = reconcile_assets(
                catalog.store,
                catalog.media_host,
                folder=current_app.config.get("CLOUDINARY_FOLDER") or "",
                grace_period=timedelta(hours=grace_hours),
                apply=apply,
            )
        except GalleryError as exc:
            current_app.logger.exception("Asset reconciliation failed")
            raise click.ClickException(exc.message) from exc

        for public_id in report.orphaned:
            click.echo(f"orphaned: {public_id}")
        click.echo(
            f"Scanned {report.scanned} assets: {len(report.orphaned)} orphaned, "
            f"{len(report.deleted)} deleted, {len(report.failed)} failed"
        )
        if report.failed:
            raise click.ClickException("Some orphaned assets could not be deleted")
