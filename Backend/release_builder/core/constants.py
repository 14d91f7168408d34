"""Fixed option lists shared by the wizard sections, validation and the reference endpoint."""

RELEASE_TYPES = ["Digital", "Music Video", "Physical"]
RELEASE_FORMATS = ["Single", "EP", "Album/Full Length"]

LANGUAGES = [
    {"value": "en", "label": "English"},
    {"value": "es", "label": "Spanish"},
    {"value": "fr", "label": "French"},
    {"value": "de", "label": "German"},
    {"value": "it", "label": "Italian"},
    {"value": "pt", "label": "Portuguese"},
    {"value": "ru", "label": "Russian"},
    {"value": "ja", "label": "Japanese"},
    {"value": "zh", "label": "Chinese"},
    {"value": "ko", "label": "Korean"},
]

# Tracks may also be instrumental
LYRICS_LANGUAGES = [{"value": "instrumental", "label": "Instrumental - No Lyrics"}] + LANGUAGES

GENRES = [
    "Pop", "Rock", "Hip-Hop", "R&B", "Electronic",
    "Classical", "Jazz", "Country", "Folk", "Latin",
]

SUBGENRES = [
    "Alternative Rock", "Indie Pop", "Trap", "Soul", "House",
    "Techno", "Chamber Music", "Bebop", "Bluegrass", "Traditional",
]

EXPLICIT_CONTENT_OPTIONS = ["None", "Explicit", "Clean"]

CONTRIBUTOR_ROLES = [
    "Co-Producer",
    "Lyricist",
    "Arranger",
    "Mastering Engineer",
    "Mixing Engineer",
    "Recording Engineer",
    "A&R Administrator",
]

PRESAVE_OPTIONS = ["immediately", "specific-date", "no-presave"]
PRICING_TIERS = ["low", "mid", "high"]
PUBLISHING_TYPES = ["controlled", "publisher", "not-published"]

# Platforms on which featured artists can be delivered as primary artists
FEATURED_AS_PRIMARY_PLATFORMS = ["Spotify", "Deezer", "Tidal"]

TERRITORIES = [
    "Afghanistan", "Albania", "Algeria", "Andorra", "Angola", "Antigua and Barbuda", "Argentina", "Armenia", "Australia", "Austria",
    "Azerbaijan", "Bahamas", "Bahrain", "Bangladesh", "Barbados", "Belarus", "Belgium", "Belize", "Benin", "Bhutan",
    "Bolivia", "Bosnia and Herzegovina", "Botswana", "Brazil", "Brunei", "Bulgaria", "Burkina Faso", "Burundi", "Cambodia", "Cameroon",
    "Canada", "Cape Verde", "Central African Republic", "Chad", "Chile", "China", "Colombia", "Comoros", "Congo", "Costa Rica",
    "Croatia", "Cuba", "Cyprus", "Czech Republic", "Denmark", "Djibouti", "Dominica", "Dominican Republic", "East Timor", "Ecuador",
    "Egypt", "El Salvador", "Equatorial Guinea", "Eritrea", "Estonia", "Ethiopia", "Fiji", "Finland", "France", "Gabon",
    "Gambia", "Georgia", "Germany", "Ghana", "Greece", "Grenada", "Guatemala", "Guinea", "Guinea-Bissau", "Guyana",
    "Haiti", "Honduras", "Hungary", "Iceland", "India", "Indonesia", "Iran", "Iraq", "Ireland", "Israel",
    "Italy", "Ivory Coast", "Jamaica", "Japan", "Jordan", "Kazakhstan", "Kenya", "Kiribati", "North Korea", "South Korea",
    "Kosovo", "Kuwait", "Kyrgyzstan", "Laos", "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya", "Liechtenstein",
    "Lithuania", "Luxembourg", "Macedonia", "Madagascar", "Malawi", "Malaysia", "Maldives", "Mali", "Malta", "Marshall Islands",
    "Mauritania", "Mauritius", "Mexico", "Micronesia", "Moldova", "Monaco", "Mongolia", "Montenegro", "Morocco", "Mozambique",
    "Myanmar", "Namibia", "Nauru", "Nepal", "Netherlands", "New Zealand", "Nicaragua", "Niger", "Nigeria", "Norway",
    "Oman", "Pakistan", "Palau", "Palestine", "Panama", "Papua New Guinea", "Paraguay", "Peru", "Philippines", "Poland",
    "Portugal", "Qatar", "Romania", "Russia", "Rwanda", "Saint Kitts and Nevis", "Saint Lucia", "Saint Vincent and the Grenadines",
    "Samoa", "San Marino", "Sao Tome and Principe", "Saudi Arabia", "Senegal", "Serbia", "Seychelles", "Sierra Leone",
    "Singapore", "Slovakia", "Slovenia", "Solomon Islands", "Somalia", "South Africa", "South Sudan", "Spain", "Sri Lanka",
    "Sudan", "Suriname", "Swaziland", "Sweden", "Switzerland", "Syria", "Taiwan", "Tajikistan", "Tanzania", "Thailand",
    "Togo", "Tonga", "Trinidad and Tobago", "Tunisia", "Turkey", "Turkmenistan", "Tuvalu", "Uganda", "Ukraine",
    "United Arab Emirates", "United Kingdom", "United States", "Uruguay", "Uzbekistan", "Vanuatu", "Vatican City",
    "Venezuela", "Vietnam", "Yemen", "Zambia", "Zimbabwe",
]

STREAMING_SERVICES = [
    "Spotify",
    "Apple Music",
    "Amazon Music",
    "YouTube Music",
    "Pandora",
    "Deezer",
    "Tidal",
    "SoundCloud",
    "iHeartRadio",
    "TikTok",
    "Instagram/Facebook",
    "Beatport",
    "Traxsource",
    "Bandcamp",
    "NetEase Cloud Music",
    "QQ Music",
    "Yandex Music",
    "JioSaavn",
    "Anghami",
    "Boomplay",
]

MUSIC_VIDEO_SERVICES = [
    "Apple Music",
    "VK / OK / BOOM",
    "Yandex Music",
    "YouTube Content ID",
    "Tidal",
    "TikTok",
]

# Media rules
ARTWORK_EXTENSIONS = [".jpg", ".jpeg", ".png"]
ARTWORK_MIN_DIMENSION = 3000
AUDIO_MIME_TYPE = "audio/wav"
AUDIO_EXTENSION = ".wav"
VIDEO_EXTENSIONS = [".mp4", ".mov", ".avi"]

# Shown to users, not checked on upload
VIDEO_REQUIREMENTS = {
    "max_file_size_mb": 500,
    "min_resolution": "1920x1080",
    "formats": ["MP4", "MOV", "AVI"],
}

# Storage buckets
AUDIO_BUCKET = "audio"
VIDEO_BUCKET = "videos"

MIN_PASSWORD_LENGTH = 6
