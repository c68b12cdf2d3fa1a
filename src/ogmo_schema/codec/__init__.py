"""
JSON codec for Ogmo projects and levels.

`fields` and `json_text` are the building blocks used by the models;
the public entry points live in `api` and are re-exported by the
top-level package.
"""
