from dial_client.config.settings import DEFAULT_SYSTEM_PROMPT, DialSettings, load_settings

__all__ = ["DEFAULT_SYSTEM_PROMPT", "DialSettings", "load_settings"]
