"""Infrastructure layer: cleansing rules and policy file schemas."""
