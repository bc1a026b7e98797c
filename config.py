import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Data source settings
    data_file: str = os.getenv("LMS_DATA_FILE", "books.txt")
    file_encoding: str = os.getenv("LMS_FILE_ENCODING", "utf-8")
    # Passed to the stub database loader, which ignores it
    db_connection: str = os.getenv("LMS_DB_CONNECTION", "jdbc:mysql://localhost:3306/library")
    default_source: str = os.getenv("LMS_DEFAULT_SOURCE", "file")

    # Display settings
    top_default: int = int(os.getenv("LMS_TOP_DEFAULT", "5"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LMS_LOG_LEVEL", "WARNING").upper()
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    def locator_for(self, source: str) -> str:
        """Default locator for a source kind: the data file or the connection string."""
        return self.db_connection if (source or "").lower() == "database" else self.data_file


settings = Settings()
