# fmm/config/__init__.py
