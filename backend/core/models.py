"""Pydantic models for API requests and responses

Field aliases keep the camelCase wire format the browser client uses.
"""
from pydantic import BaseModel, Field
from typing import Any, Optional, List


class GenerateRequest(BaseModel):
    """Content bundle generation request"""
    api_key: Optional[str] = Field(None, alias="apiKey", description="Caller's LLM API key, used for this request only")
    custom_prompt: Optional[str] = Field(
        None,
        alias="customPrompt",
        description="Story topic; a random built-in topic is used when blank"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "apiKey": "sk-...",
                "customPrompt": "Generate a story about a 1970s bank heist in California"
            }
        }
    }


class StoryBundle(BaseModel):
    """Generated video content bundle"""
    title: str = Field(..., description="YouTube video title")
    script: str = Field(..., description="Full story script")
    scene_descriptions: List[str] = Field(
        default_factory=list,
        alias="sceneDescriptions",
        description="Visual scene descriptions in story order"
    )
    narration: str = Field(..., description="Voice-over narration script")
    word_count: int = Field(..., alias="wordCount", ge=0, description="Word count of the script")
    estimated_duration: str = Field(
        ...,
        alias="estimatedDuration",
        description="Narration length range, e.g. '10-12 minutes'"
    )

    model_config = {"populate_by_name": True}


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint"""
    error: ErrorBody
