"""
sliderUI catalog package.

Layered like the launcher it serves:

  sliderui/repositories/ - pure I/O, the delimited record codec, the games
                            list and the JSON configuration file.
  sliderui/services/     - business logic for display sorting, settings and the
                            games-list operations.

``SliderApp`` (in ``slider.py``) is the integration point: it creates the
repositories and services and exposes them as public attributes
(e.g. ``app.catalog_service``).  The CLI in ``slider.py`` and the JSON routes
in ``slider_gui.py`` both go through those services.
"""
