from aggregate_feeds.models import FeedSource

FEED_SOURCES = [
    FeedSource("https://fintechs.fi/category/gamefi/feed/", "fintechs.xml"),
    FeedSource("https://bitebi.com/category/crypto/gamefi/feed/", "bitebi.xml"),
    FeedSource("https://news.coincu.com/c/gamefi/feed/", "coincu.xml"),
    FeedSource("https://blog.joystick.club/feed", "joystick.xml"),
    # FeedSource("https://rss.feedspot.com/gamefi_rss_feeds/", "feedspot.xml"),
    FeedSource("https://polemos.io/feed/", "polemos.xml"),
    FeedSource("https://playtoearndiary.com/category/gamefi/feed/", "playtoearndiary.xml"),
    FeedSource("https://suzumlm.com/en/category/news/games/feed/", "suzumlm.xml"),
    FeedSource("https://nftandgamefi.com/category/gamefi/feed/", "nftandgamefi.xml"),
    FeedSource("https://metaknow.org/category/gamefi/feed/", "metaknown.xml"),
    FeedSource("https://defi-gamefi.com/feed/", "defi-gamefi.xml"),
    # FeedSource("https://blockcrunch.co/category/gamefi/feed/", "blockcrunch.xml"),
    FeedSource("https://zaisan.io/category/gamefi/feed/", "zaisan.xml"),
    # FeedSource("https://cryptowallcity.com/gamefi/feed/", "cryptowallcity.xml"),
    # FeedSource("https://gamefiboost.com/feed/", "gamifyboot.xml"),
    # FeedSource("https://coinpasar.sg/category/cryptocurrencies/gamefi/feed/", "coinparsar.xml"),
    # FeedSource("https://www.nftnewz.net/en/category/nft-game/feed/", "nftnewz.xml"),
    FeedSource("https://algobitz.com/category/gamefi/feed/", "algobitz.xml"),
    FeedSource("https://nft4genz.com/category/gamefi/feed/", "nft4gnez.xml"),
    # FeedSource("https://shieldcoin.press/category/gamefi/feed/", "shieldcoin.xml"),
    FeedSource("https://metaversenews.com/category/gamefi/feed/", "metaversenews.xml"),
    # FeedSource("https://nftguide.live/category/gamefi/feed/", "nftguide.xml"),
    # FeedSource("https://avalanche.today/category/gamefi/feed/", "avalanche.xml"),
    # FeedSource("https://cosmosnews.net/category/gamefi/feed/", "cosmosnews.xml"),
    FeedSource("https://wngamefi.com/feed", "wangamefi.xml"),
]
