from leadbot.api.webhook import create_app, process_message

__all__ = ["create_app", "process_message"]
