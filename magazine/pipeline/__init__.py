"""
Article generation pipeline.

research (source articles per author) -> draft (author persona) -> banner
(image description + image) -> merge into the article store.
"""
