from dataclasses import dataclass
from typing import Optional


@dataclass
class NewRecipe:
    name: str # The recipe name shown in the feed
    time: str # Free-text cooking time, e.g. "20 min"
    author_id: int # ID of the publishing user
    description: Optional[str] = None # Optional longer description
    image_path: Optional[str] = None # Transient path of the main picture, copied on publish


@dataclass
class NewIngredient:
    name: str # Blank names are skipped on publish
    amount: str = "" # Free text, not a structured quantity


@dataclass
class NewStep:
    description: str # What to do in this step
    name: Optional[str] = None # Optional headline
    image_path: Optional[str] = None # Transient path of the step picture, copied on publish
