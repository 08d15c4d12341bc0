# fmm/dat/__init__.py
