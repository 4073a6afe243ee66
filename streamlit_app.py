from pose_challenge.app import main

main()
