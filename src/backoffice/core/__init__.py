"""Configuration and logging shared by the backoffice domains."""
