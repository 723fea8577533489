from lottiekit.cli import main

main()
