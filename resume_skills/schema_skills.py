# canonical extraction schema (flat list of skill strings, model order kept)
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ExtractSkillsOutput(BaseModel):
    # extra keys in a reply are ignored; the schema sent to the model still forbids them
    model_config = ConfigDict(extra="ignore", json_schema_extra={"additionalProperties": False})

    skills: List[str] = Field(description="An array of key skills extracted from the resume.")


SKILLS_JSON_SCHEMA = ExtractSkillsOutput.model_json_schema()
