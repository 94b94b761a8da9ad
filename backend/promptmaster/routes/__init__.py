"""
PromptMaster Backend - API Routes Package
=========================================

Route Inventory:
    - prompts.py:    /api/prompts, /api/prompts/improve, /api/prompts/voice,
                     /api/prompts/{id}, /api/prompts/{id}/favorite
    - templates.py:  /api/templates, /api/templates/category/{category},
                     /api/templates/{id}
    - languages.py:  /api/languages
    - health.py:     /health

Routes stay thin: parse the request, call a service, shape the response.
"""
