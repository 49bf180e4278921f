"""Describes the recipe domain. Centres around the content service.

Why is this thin?

- Recipes are written and stored in Contentful, not here.
- Nothing is created or modified, only read and reshaped for rendering.
- No invariants that need to be enforced beyond what the content model does.

The content service sits behind `ContentSource` so it can be faked.
Rich text is the one structured thing we parse ourselves.
"""
