# fmm/saves/__init__.py
