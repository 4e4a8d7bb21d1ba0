"""Helps manage notes stored as files and folders in a note directory.

If you installed via ``pip``, run ``noxe -h`` to get help.
Or, run ``python3 -m noxe -h``.

To use the Python API, look at :class:`noxe.api.Noxe`
"""
