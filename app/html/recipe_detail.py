from jinja2 import Environment
from markupsafe import Markup

from domain.models import ImageRef, Pending, Recipe
from domain.rich_text import to_html


class RecipeDetail:
    def __init__(
        self,
        recipe: Recipe | Pending,
        *,
        environment: Environment,
        template_name: str = "recipe-detail.html",
        pending_template_name: str = "skeleton.html",
    ) -> None:
        self.recipe = recipe
        self.env = environment
        self.name = template_name
        self.pending_name = pending_template_name

    @property
    def pending(self) -> bool:
        return isinstance(self.recipe, Pending)

    @property
    def title(self) -> str:
        assert isinstance(self.recipe, Recipe)
        return self.recipe.title

    @property
    def banner(self) -> ImageRef:
        assert isinstance(self.recipe, Recipe)
        return self.recipe.featured_image

    @property
    def cooking_time(self) -> str:
        assert isinstance(self.recipe, Recipe)
        return f"Takes about {self.recipe.cooking_time} mins to cook."

    @property
    def ingredients(self) -> str:
        assert isinstance(self.recipe, Recipe)
        return self.recipe.ingredients_text

    @property
    def method(self) -> Markup:
        assert isinstance(self.recipe, Recipe)
        return to_html(self.recipe.method)

    def render(self) -> str:
        if self.pending:
            return self.env.get_template(self.pending_name).render()
        return self.env.get_template(self.name).render(recipe=self)
