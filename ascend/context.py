"""
Application context: the process-wide resources every request shares.
Built explicitly at startup and torn down at shutdown; nothing here is a module global.
"""

import logging
from dataclasses import dataclass, field

from ascend.config import Settings
from ascend.db import Database
from ascend.metrics import AppMetrics

logger = logging.getLogger("ascend.context")


@dataclass
class AppContext:
    settings: Settings
    database: Database
    metrics: AppMetrics = field(default_factory=AppMetrics)

    @classmethod
    def from_settings(cls, settings: Settings, metrics: AppMetrics | None = None) -> "AppContext":
        return cls(settings=settings, database=Database(settings), metrics=metrics or AppMetrics())

    async def start(self) -> None:
        await self.database.create_tables()
        if self.settings.enable_metrics:
            self.metrics.start_exporter(self.settings.metrics_port)
            logger.info("metrics_exporter_started", extra={"port": self.settings.metrics_port})

    async def stop(self) -> None:
        await self.database.dispose()
