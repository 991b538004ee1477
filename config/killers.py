from pipeline.game_state import KillerIdentity, StartTrigger

# Killers whose power label is readable on the HUD. Keywords are matched as whole words.
DETECTABLE_KILLERS = (
    KillerIdentity(name="BLIGHT", start=StartTrigger(m2=True, label="RUSH (M2)"), power_keywords=("RUSH",)),
    KillerIdentity(name="NURSE", start=StartTrigger(m2=True, label="BLINK (M2)"), power_keywords=("BLINK",)),
)
