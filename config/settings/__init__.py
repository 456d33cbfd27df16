"""Settings package for the hotel calendar engine.

`base.py` holds the configuration shared by every environment; `dev.py`,
`prod.py` and `test.py` extend it.
"""
