"""careplan_server — FastAPI REST API for the care plan assessment engine.

Exposes the assessment wizards (dehydration, pain), care plan creation
and overview, and the category reference tables as a stateless HTTP API.
"""
