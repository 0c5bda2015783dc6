from typing import Literal
from pydantic import BaseModel, ValidationError

class SettingsSchema(BaseModel):
    db_path: str = "workout.db"
    storage_prefix: str = "@pumpgym"
    anonymous_user: str = "anonymous"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    weight_unit: Literal["kg", "lb"] = "kg"
    apply_weekly_template: bool = True

def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
