DEFAULTS = dict(
    animation=dict(
        growthRateMin=0.015, growthRateSpan=0.01,
        wiggleDecay=0.98, wigglePhaseStep=0.1, wiggleFloor=1e-3,
        swayPhaseStep=0.01, swayIntensityMin=0.01, swayIntensitySpan=0.02,
    ),
    geometry=dict(
        trunkLengthPerGrowth=30.0, depthPerGrowth=1.5, maxDepth=10,
        minBranchLength=2.0, minBlossomLength=1.0,
        lengthReductionMin=0.65, lengthReductionSpan=0.2,
        widthPerLevel=0.8, minWidth=0.5,
        wiggleAngle=0.2, wiggleDepthPhase=0.5, swayDepthPhase=0.3,
        curveOffset=0.4, blossomBase=1.5, blossomWiggle=1.5,
        glowColor="rgba(80, 254, 213, 0.7)", glowBlur=15.0, blossomBlur=10.0,
    ),
    canopy=dict(
        perBranch=2, radiusMin=15.0, radiusSpan=15.0,
        speedSpan=0.02, sizeMin=1.0, sizeSpan=1.5,
        centerRatio=0.8, radiusPerGrowth=3.0, squash=0.6,
        color="rgba(80, 254, 213, 0.8)", glowBlur=8.0,
    ),
    splash=dict(
        count=50, spread=1.2, speedMin=3.0, speedSpan=5.0,
        lifeMin=80.0, lifeSpan=40.0, sizeMin=1.0, sizeSpan=2.0,
        gravity=0.05, color="rgba(80, 254, 213, 0.9)", glowBlur=10.0,
    ),
    interaction=dict(
        pointerThreshold=5.0, touchThreshold=10.0,
        pointerRadius=20.0, touchRadius=28.0, trunkHeightPerGrowth=40.0,
    ),
    system=dict(frameIntervalMs=16, transparent=False, background="#0A0C12"),
)
