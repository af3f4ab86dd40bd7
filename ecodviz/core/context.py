"""
context.py -- Provide application context for ecodviz
"""
import logging
from typing import Optional

from ecodviz.config import ConfigManager
from ecodviz.db.manager import DBManager
from ecodviz.db.repositories.domain_repository import DomainRepository
from ecodviz.structure.analyzer import StructureAnalyzer
from ecodviz.structure.loader import StructureLoader
from ecodviz.structure.styles import StyleOptions


class ApplicationContext:
    """Configuration plus the services built from it

    The database manager is created on first use, so commands that never
    touch the database run without database settings.
    """

    def __init__(self, config_path: Optional[str] = None,
                 config_manager: Optional[ConfigManager] = None):
        """Initialize application context

        Args:
            config_path: Path to configuration file
            config_manager: Ready configuration, takes precedence over config_path
        """
        self.logger = logging.getLogger("ecodviz.context")
        self.config_manager = config_manager or ConfigManager(config_path)
        self._db_manager: Optional[DBManager] = None
        self.logger.debug("Configuration initialized")

    @property
    def config(self):
        return self.config_manager.config

    @property
    def db(self) -> DBManager:
        """Get database manager

        Returns:
            Database manager
        """
        if self._db_manager is None:
            self._db_manager = DBManager(self.config_manager.get_db_config())
            self.logger.info("Database manager initialized")
        return self._db_manager

    def domain_repository(self) -> DomainRepository:
        return DomainRepository(self.db)

    def structure_loader(self) -> StructureLoader:
        return StructureLoader(self.config_manager.get_structure_config())

    def analyzer(self) -> StructureAnalyzer:
        return StructureAnalyzer.from_config(self.config_manager)

    def style_options(self) -> StyleOptions:
        return StyleOptions.from_config(self.config_manager.get_viewer_config())
