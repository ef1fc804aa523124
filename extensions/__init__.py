"""Admin extensions. Each subpackage exposes an ExtensionServiceProvider subclass."""
