from textual.theme import Theme

hedge_rose = Theme(
    name="hedge-rose",
    primary="#FF4D6D",
    secondary="#C9184A",
    accent="#FF8FA3",
    foreground="#F5E6E8",
    background="#0D0A0B",
    success="#80ED99",
    warning="#FFB703",
    error="#FF3B30",
    surface="#171214",
    panel="#221A1D",
    dark=True,
    variables={
        "footer-key-foreground": "#ff4d6d",
        "input-selection-background": "#ff4d6d 25%",
        "block-cursor-text-style": "none",
    },
)

hedge_moss = Theme(
    name="hedge-moss",
    primary="#7CB518",
    secondary="#5C8001",
    accent="#FBB02D",
    foreground="#EEF5DB",
    background="#0B100A",
    success="#A7C957",
    warning="#FBB02D",
    error="#E63946",
    surface="#131A11",
    panel="#1C2619",
    dark=True,
    variables={
        "footer-key-foreground": "#7cb518",
        "input-selection-background": "#7cb518 25%",
        "block-cursor-text-style": "none",
    },
)

hedge_burrow = Theme(
    name="hedge-burrow",
    primary="#6F4E37",
    secondary="#A47551",
    accent="#B5452B",
    foreground="#2B211A",
    background="#F7F1E8",
    success="#4F772D",
    warning="#D68C45",
    error="#B23A48",
    surface="#EFE6D8",
    panel="#E4D7C3",
    dark=False,
    variables={
        "footer-key-foreground": "#6f4e37",
        "input-selection-background": "#b5452b 25%",
        "block-cursor-text-style": "none",
    },
)

ALL_THEMES = [hedge_rose, hedge_moss, hedge_burrow]
