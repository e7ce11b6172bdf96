"""Base común de los esquemas: JSON en camelCase, Python en snake_case."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(CamelModel):
    """Todas las respuestas llevan `error` y `message` además del payload."""
    error: bool = False
    message: str = ""
