# fmm/mods/__init__.py
