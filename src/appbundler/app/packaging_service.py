"""Orchestrates the bundle and disk-image phases for one invocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from appbundler.app.bundle import BundleService
from appbundler.app.config import BundlerConfig
from appbundler.app.diskimage import STAGING_DIR, DiskImageService
from appbundler.domain.bundle import BundleLayout, BundleReport, DiskImageReport
from appbundler.ports.command_runner import CommandRunner


@dataclass(frozen=True)
class PackagingResult:
    bundle: BundleReport
    disk_image: DiskImageReport | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bundle": self.bundle.to_dict(),
            "disk_image": self.disk_image.to_dict() if self.disk_image else None,
        }


class PackagingService:
    def __init__(self, runner: CommandRunner) -> None:
        self._disk_images = DiskImageService(runner)

    def bundle(self, config: BundlerConfig, *, generate_dmg: bool | None = None) -> PackagingResult:
        """Assemble the .app; build the disk image afterwards when requested.

        ``generate_dmg`` overrides ``dmg.generate`` from the configuration.
        """

        bundle_service = BundleService(config.project, config.bundle)
        report = bundle_service.assemble()
        if generate_dmg is None:
            generate_dmg = config.dmg.generate
        disk_image = None
        if generate_dmg:
            disk_image = self.disk_image(config, bundle_name=bundle_service.app_name())
        return PackagingResult(bundle=report, disk_image=disk_image)

    def disk_image(self, config: BundlerConfig, *, bundle_name: str | None = None) -> DiskImageReport:
        """Package an already assembled ``<bundle_name>.app`` from the build directory."""

        project = config.project
        app_name = bundle_name or BundleService(project, config.bundle).app_name()
        output_dir = project.output_dir
        layout = BundleLayout.for_app(output_dir, app_name)
        dmg_file = DiskImageService.target_file(output_dir, app_name, project.version, config.dmg)
        return self._disk_images.package(
            layout.app_dir,
            output_dir / STAGING_DIR,
            dmg_file,
            config.dmg,
            volume_name=config.dmg.volume_name or app_name,
        )


__all__ = ["PackagingResult", "PackagingService"]
