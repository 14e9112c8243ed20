"""
Onboarding Module for the Onboarding API
Domain: Save & load of frontend onboarding records

Endpoints:
- POST /save         (x-api-key when API_KEY is set)
- GET  /load/<slug>  (x-api-key when API_KEY is set)
"""
