"""AI tools directory backed by a headless CMS."""
