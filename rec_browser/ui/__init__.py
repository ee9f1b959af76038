"""
Terminal UI: Textual app, detail card, footer and input mapping.
"""
