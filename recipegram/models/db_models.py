from pydantic import BaseModel, Field, field_validator
from typing import List, Dict, Any, Optional, Tuple
from enum import Enum

from .recipe import NewRecipe, NewIngredient, NewStep


class ErrorCode(str, Enum):
    """Error codes returned in failed operation results"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    STORAGE_ERROR = "STORAGE_ERROR"
    MEDIA_COPY_FAILURE = "MEDIA_COPY_FAILURE"


def error_result(message: str, code: ErrorCode) -> Dict[str, Any]:
    """Build the failed-operation result shared by every service."""
    return {"success": False, "error": message, "error_code": code.value}


class RegisterInput(BaseModel):
    """Input model for registering a new user"""
    username: str = Field(..., description="Login name, unique regardless of letter case", min_length=1)
    password: str = Field(..., description="Password for the new account", min_length=1)
    image_path: Optional[str] = Field(None, description="Path or URI of a profile picture to copy into app storage")


class LoginInput(BaseModel):
    """Input model for logging in"""
    username: str = Field(..., description="Login name (letter case is ignored)", min_length=1)
    password: str = Field(..., description="Account password", min_length=1)


class IngredientInput(BaseModel):
    """One ingredient row of the recipe form. Rows with a blank name are skipped on publish."""
    name: str = Field("", description="Ingredient name, e.g. 'Flour'")
    amount: str = Field("", description="Free-text amount, e.g. '200 g' or '1 cup'")


class StepInput(BaseModel):
    """One instruction step of the recipe form"""
    name: Optional[str] = Field(None, description="Optional step headline")
    description: str = Field(..., description="What to do in this step")
    image_path: Optional[str] = Field(None, description="Path or URI of a picture illustrating the step")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError("Step description is required")
        return v


class PublishRecipeInput(BaseModel):
    """Input model for publishing a recipe with its ingredients and steps"""
    author_id: int = Field(..., description="ID of the user publishing the recipe")
    name: str = Field(..., description="Recipe name")
    description: Optional[str] = Field(None, description="Optional recipe description")
    time: str = Field(..., description="Cooking time label, e.g. '20 min'")
    image_path: Optional[str] = Field(None, description="Path or URI of the main recipe picture")
    ingredients: List[IngredientInput] = Field(..., description="Ingredients in display order")
    steps: List[StepInput] = Field(..., description="Steps in cooking order")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Recipe name is missing")
        return v

    @field_validator('time')
    @classmethod
    def validate_time(cls, v):
        if not v.strip():
            raise ValueError("Time is missing")
        return v

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        if not any(ingredient.name.strip() for ingredient in v):
            raise ValueError("Add ingredients!")
        return v

    @field_validator('steps')
    @classmethod
    def validate_steps(cls, v):
        if not v:
            raise ValueError("Add at least one step!")
        return v

    def to_records(self) -> Tuple[NewRecipe, List[NewIngredient], List[NewStep]]:
        """Split the form into the records RecipeRepository.publish expects."""
        recipe = NewRecipe(
            name=self.name,
            time=self.time,
            author_id=self.author_id,
            description=self.description,
            image_path=self.image_path
        )
        ingredients = [NewIngredient(name=i.name, amount=i.amount) for i in self.ingredients]
        steps = [
            NewStep(description=s.description, name=s.name, image_path=s.image_path)
            for s in self.steps
        ]
        return recipe, ingredients, steps
