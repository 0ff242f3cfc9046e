from http_to_sentry.cli import main

main()
