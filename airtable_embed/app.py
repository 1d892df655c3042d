from airtable_embed.api.app import app_factory, run

__all__ = ["app_factory", "run"]


if __name__ == "__main__":
    run()
