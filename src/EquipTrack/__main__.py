from EquipTrack.main import main

main()
