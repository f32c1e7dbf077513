"""
Default song roster loaded at startup.
"""

from typing import List

from .song import Song

CDN_AUDIO = "https://res.cloudinary.com/dzwfuzxxw/video/upload"
CDN_IMAGE = "https://res.cloudinary.com/dzwfuzxxw/image/upload"

# (id, title, artist, album, year, votes, audio path, cover)
_DEFAULT_ROSTER = [
    ("audioslave-cochise", "Cochise", "Audioslave", "Audioslave", 2002, 5,
     "v1748878548/Audioslave_-_Cochise_HD_YymwGlbqzIc_lz8zjk.mp3",
     f"{CDN_IMAGE}/v1748897363/Audioslave-2002-capa-album-min_iicsnx.webp"),
    ("deftones-change", "Change (In the House of Flies)", "Deftones", "White Pony", 2000, 8,
     "v1748879300/Deftones_-_Change_In_The_House_Of_Flies_oSDNIINcK08_ejs6hn.mp3",
     f"{CDN_IMAGE}/v1748897364/Deftones-WhitePony_af94d8a7-be8b-41ea-8f62-8a6410ace2d2_vbfqyq.webp"),
    ("qotsa-bronze", "The Bronze", "Queens of the Stone Age", "Queens of the Stone Age", 1998, 3,
     "v1748879302/Queens_Of_The_Stone_Age_The_Bronze_P3kM58n2ceE_x9m9kx.mp3",
     f"{CDN_IMAGE}/v1748897363/61bu-cKoykL_nihmew.webp"),
    ("deftones-my-own-summer", "My Own Summer (Shove It)", "Deftones", "Around the Fur", 1997, 6,
     "v1748879303/Deftones_-_My_Own_Summer_vLjOwAPzt4o_xdemns.mp3",
     f"{CDN_IMAGE}/v1748897363/3e6814b457a9087e0c46d5a949de2766_ik37wx.webp"),
    ("soundgarden-outshined", "Outshined", "Soundgarden", "Badmotorfinger", 1991, 2,
     "v1748879304/Soundgarden_-_Outshined_Studio_Version_uLZBhlTXHuo_cfqaw1.mp3",
     f"{CDN_IMAGE}/v1748897364/71rRNAnVW6L_cpn09c.webp"),
    ("qotsa-avon", "Avon", "Queens of the Stone Age", "Lullabies to Paralyze", 2005, 4,
     "v1748893838/Queens_of_the_Stone_Age_-_Avon_Official_Audio_aimHMr-Ee4o_ay6jsw.mp3",
     "https://upload.wikimedia.org/wikipedia/en/a/a6/Qotsa_lullabies.jpg"),
    ("qotsa-if-only", "If Only", "Queens of the Stone Age", "Lullabies to Paralyze", 2005, 1,
     "v1748893839/Queens_of_the_Stone_Age_-_If_Only_Official_Audio_1HqTh0nd9GE_rojfrl.mp3",
     "https://upload.wikimedia.org/wikipedia/en/a/a6/Qotsa_lullabies.jpg"),
    ("gorillaz-feel-good-inc", "Feel Good Inc.", "Gorillaz", "Demon Days", 2005, 7,
     "v1748893840/Gorillaz_-_Feel_Good_Inc_Lyrics_IbpOfzrNjTY_cwzxnh.mp3",
     f"{CDN_IMAGE}/v1748897363/2025-06-02_17-48_adhnkt.png"),
    ("rhcp-around-the-world", "Around The World", "Red Hot Chili Peppers", "Californication", 1999, 9,
     "v1748893841/Red_Hot_Chili_Peppers_-_Around_The_World_Official_Music_Video_HD_UPGRADE_a9eNQZbjpJk_d2oido.mp3",
     f"{CDN_IMAGE}/v1748897364/304b3f84-9c1f-4620-bd1d-60d6d63ff7fc_fgs0hh.webp"),
    ("gorillaz-dare", "DARE", "Gorillaz", "Demon Days", 2005, 3,
     "v1748893841/DARE_rIq6i4-8Nww_hfwl3r.mp3",
     f"{CDN_IMAGE}/v1748897363/2025-06-02_17-48_adhnkt.png"),
    ("soundgarden-black-hole-sun", "Black Hole Sun", "Soundgarden", "Superunknown", 1994, 6,
     "v1748893842/Soundgarden_-_Black_Hole_Sun_HQ_Y6Kz6aXsBSs_lvcs9q.mp3",
     f"{CDN_IMAGE}/v1748897363/soundgarden-superunknown_rvcxuo.webp"),
]

# Audio used for songs added via chat until a real upload exists
PREVIEW_AUDIO_REF = f"{CDN_AUDIO}/v1748879303/sample_audio_preview.mp3"


def default_roster() -> List[Song]:
    """Build fresh Song objects for the default roster."""
    return [
        Song(
            id=song_id,
            title=title,
            artist=artist,
            album=album,
            year=year,
            votes=votes,
            audio_ref=f"{CDN_AUDIO}/{audio_path}",
            cover_ref=cover,
        )
        for song_id, title, artist, album, year, votes, audio_path, cover in _DEFAULT_ROSTER
    ]
