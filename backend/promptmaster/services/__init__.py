"""
PromptMaster Backend - Services Layer
=====================================

Business logic between the routes (HTTP) and the database.

Service Inventory:
    - LLMService (abstract):  contract of the Generation/Improvement Stage
    - GeminiService:          Google Gemini implementation
    - response_decoder:       best-effort decoding of "improve" answers
    - TranslationService:     fail-soft translation fallback chain
    - PromptPipeline:         normalize → generate/improve → localize
    - AudioService:           voice upload validation
    - PromptService:          pipeline + prompt history persistence
    - TemplateService:        public template catalogue
"""
