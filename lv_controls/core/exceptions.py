class ListViewControlsError(Exception):
    """Base exception for all lv_controls errors"""
    pass

class ConfigError(ListViewControlsError):
    """Invalid or inconsistent global.json or list view config"""
    pass

class CompatibilityError(ListViewControlsError):
    """
    No usable list view could be located for a producer, or the located
    list view belongs to a different entity.

    The message is shown to end users as-is.
    """
    pass

class QuerySyntaxError(ListViewControlsError):
    """A textual constraint could not be parsed"""
    pass
