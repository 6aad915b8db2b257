"""Apply VS Code settings and keybindings and install extensions."""
