"""
ForgeKit - declarative build and install orchestration for external tools.
"""
