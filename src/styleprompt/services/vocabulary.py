"""Static tag vocabularies shared by the style, instrument and remix assemblers."""

from __future__ import annotations

STEREO_IMAGING = [
    "wide stereo field",
    "mono-centered mix",
    "natural stereo spread",
    "binaural panning",
    "tight stereo image",
    "panned doubles",
]

DYNAMIC_DESCRIPTORS = [
    "punchy dynamics",
    "gentle compression",
    "wide dynamic range",
    "loud limited master",
    "breathing dynamics",
    "controlled transients",
]

DEFAULT_TEXTURES = [
    "warm analog texture",
    "clean modern production",
    "subtle tape saturation",
]

DEFAULT_REVERBS = [
    "medium room reverb",
    "natural hall reverb",
    "subtle plate reverb",
]

GENERIC_RECORDING_CONTEXTS = [
    "professional recording studio",
    "home studio recording",
    "live performance capture",
    "small room session",
    "analog studio session",
]

# Keys are matched against the lower-cased spatial hint by substring.
SPATIAL_HINT_REVERBS = {
    "intimate": ["close-miked dry room", "tight vocal booth ambience"],
    "room": ["natural room reverb", "wood-paneled room sound"],
    "hall": ["grand hall reverb", "long hall tail"],
    "vast": ["vast cavern reverb", "endless space reverb"],
    "outdoor": ["open-air reflections", "distant canyon echo"],
    "club": ["sweaty club reflections"],
}

ERA_TEXTURES = {
    "50s": ["mono ribbon warmth"],
    "60s": ["mono tube warmth", "four-track tape color"],
    "70s": ["analog tape warmth", "console saturation"],
    "80s": ["gated digital sheen", "early digital gloss"],
    "90s": ["crunchy sampler grit", "adat hiss"],
    "2000s": ["bright digital polish"],
    "modern": ["hyper-clean modern mix"],
}

ERA_TAGS = {
    "50s": ["1950s production", "vintage ribbon mics"],
    "60s": ["1960s production", "vintage tape echo"],
    "70s": ["1970s production", "vintage console sound"],
    "80s": ["1980s production", "retro drum machines"],
    "90s": ["1990s production", "sampler era grit"],
    "2000s": ["2000s production", "early digital era"],
    "modern": ["contemporary production", "streaming-era loudness"],
}

INTENT_TAGS = {
    "background": "unobtrusive background listening",
    "focus": "focus-friendly flow",
    "dance": "dancefloor-ready energy",
    "cinematic": "cinematic scoring feel",
    "emotional": "emotionally driven arrangement",
    "workout": "high-drive workout energy",
    "sleep": "sleep-friendly calm",
}

TEXTURE_TAGS = [
    "lush layers",
    "sparse arrangement",
    "rich harmonics",
    "airy top end",
    "grainy texture",
    "silky textures",
    "organic feel",
    "layered depth",
    "crisp transients",
    "warm low end",
]

VOCAL_TAGS = [
    "breathy vocals",
    "stacked harmonies",
    "close-mic vocal delivery",
    "powerful belting",
    "falsetto accents",
    "call-and-response vocals",
    "spoken word passages",
    "raspy vocal tone",
    "layered backing vocals",
]

SPATIAL_TAGS = [
    "immersive soundstage",
    "close and present",
    "distant echoes",
    "expansive space",
    "enveloping ambience",
]

HARMONIC_TAGS = [
    "extended chords",
    "modal interchange",
    "chromatic passing tones",
    "lush voicings",
    "suspended harmonies",
    "modulating key changes",
]

DYNAMIC_TAGS = [
    "building intensity",
    "explosive climax",
    "gradual crescendo",
    "sudden drops",
    "ebb and flow dynamics",
]

TEMPORAL_TAGS = [
    "steady groove",
    "swung rhythm",
    "syncopated feel",
    "half-time feel",
    "rubato phrasing",
    "driving pulse",
]

DEFAULT_TAG_WEIGHTS = {
    "vocal": 0.6,
    "spatial": 0.5,
    "harmonic": 0.4,
    "dynamic": 0.4,
    "temporal": 0.3,
}

ENERGY_LEVEL_SCALES = {
    "low": {"vocal": 0.8, "spatial": 1.3, "harmonic": 1.0, "dynamic": 0.6, "temporal": 0.8},
    "medium": {"vocal": 1.0, "spatial": 1.0, "harmonic": 1.0, "dynamic": 1.0, "temporal": 1.0},
    "high": {"vocal": 1.1, "spatial": 0.8, "harmonic": 0.9, "dynamic": 1.4, "temporal": 1.3},
}

MOOD_KEYWORDS = [
    "melancholic",
    "melancholy",
    "nostalgic",
    "euphoric",
    "dreamy",
    "dark",
    "uplifting",
    "romantic",
    "mysterious",
    "peaceful",
    "energetic",
    "aggressive",
    "hopeful",
    "bittersweet",
    "haunting",
    "playful",
    "tense",
    "serene",
    "triumphant",
    "lonely",
    "cozy",
    "chill",
    "sad",
    "happy",
    "angry",
    "epic",
    "groovy",
    "smooth",
    "calm",
    "intense",
]

MOOD_POOL = [
    "emotional",
    "dreamy",
    "bittersweet",
    "uplifting",
    "brooding",
    "wistful",
    "euphoric",
    "introspective",
    "tender",
    "restless",
    "triumphant",
    "hazy",
    "mysterious",
    "playful",
    "serene",
]

THEME_KEYWORDS = {
    "love": "love and longing",
    "heartbreak": "heartbreak",
    "memory": "fading memories",
    "memories": "fading memories",
    "hope": "quiet hope",
    "rain": "rainy atmosphere",
    "ocean": "ocean waves",
    "sea": "ocean waves",
    "forest": "forest ambience",
    "mountain": "mountain air",
    "snow": "falling snow",
    "city": "city lights",
    "space": "cosmic space",
    "stars": "starlit sky",
    "dream": "dreamscape",
    "time": "passing time",
    "night": "nighttime",
    "midnight": "midnight hours",
    "sunrise": "sunrise glow",
    "sunset": "golden hour",
    "summer": "summer warmth",
    "winter": "winter chill",
    "journey": "journey",
    "road": "open road",
    "dance": "dancing",
    "escape": "escape",
}

HARMONIC_COMPLEXITY_KEYWORDS = [
    "jazz",
    "progressive",
    "modal",
    "chromatic",
    "sophisticated",
    "complex",
    "advanced",
    "extended chords",
    "polytonal",
]

RECORDING_DESCRIPTORS = [
    "analog warmth",
    "tape saturation",
    "vintage console",
    "room ambience",
    "close-miked",
    "wide stereo",
    "natural reverb",
    "live takes",
    "minimal overdubs",
    "modern clarity",
    "boutique preamps",
    "ribbon microphones",
]

KEYS = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]

DEFAULT_MODES = ["major", "minor"]

DEFAULT_PROGRESSIONS = [
    {"name": "pop cadence", "pattern": "I-V-vi-IV"},
    {"name": "minor lament", "pattern": "i-VII-VI-V"},
]

DEFAULT_VOCALS = {
    "ranges": ["alto", "tenor", "mezzo-soprano"],
    "deliveries": ["smooth", "expressive"],
}

SECTION_DIRECTIONS = {
    "INTRO": [
        "{lead} enters softly over {support}",
        "sparse {support} sets the scene",
    ],
    "VERSE": [
        "{support} carries the groove while {lead} answers",
        "restrained {lead} with steady {support}",
    ],
    "CHORUS": [
        "full band lift led by {lead}",
        "{lead} and {support} open up together",
    ],
    "BRIDGE": [
        "stripped back to {support} before the final lift",
        "{lead} takes a turn over shifting {support}",
    ],
    "OUTRO": [
        "{lead} fades over lingering {support}",
        "{support} rings out to silence",
    ],
}
