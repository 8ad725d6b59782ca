from yt_sync.cli import main

main()
