from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = "Pergosolar"
    CONTACT_EMAIL: str = "erica.b@pergosolar.it"
    STARTING_ADDRESS: str = "Via Disciplina 11, 37036 San Martino Buon Albergo, Verona"

    # Published spreadsheet exports, empty string means "use built-in defaults"
    TRANSPORT_CSV_URL: str = ""
    VARIABLES_CSV_URL: str = ""
    BALLAST_CSV_URL: str = ""
    SHEET_FETCH_TIMEOUT: int = 20

    # Gemini is optional: AI collaborators are skipped when the key is missing
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    class Config:
        env_file = ".env"


settings = Settings()
