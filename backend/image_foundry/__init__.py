"""Image Foundry: prompt -> description -> feedback -> image sessions."""
