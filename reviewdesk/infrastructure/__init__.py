# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - auth/:   bearer tokens for App Store Connect and Google Play
# - stores/: store API backends and the ReviewClient facade
# - llm/:    OpenAI-compatible reply drafting with a template fallback
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
