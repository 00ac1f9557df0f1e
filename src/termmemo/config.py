import os


class Settings:
    PROJECT_NAME: str = "termmemo"
    DEBUG: bool = os.environ.get("TERMMEMO_DEBUG", "") == "1"
    LOG_DIR: str = "log"
    LOG_FILE: str = "termmemo.log"
    DB_DIR: str = os.environ.get("TERMMEMO_DB_DIR", "db")
    DB_FILE: str = "termmemo.db"
    DATA_DIR: str = os.environ.get("TERMMEMO_DATA_DIR", "data")
    TERMS_FILE: str = "terms.json"
    TEST_SIZE: int = 10
    QUESTION_COUNTS: tuple = (5, 10, 15, 20)
    MIN_TERMS: int = 4
    OPTION_COUNT: int = 4
    SAME_CATEGORY_DISTRACTORS: int = 2
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
